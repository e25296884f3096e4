"""
Atelier Catalog — Application Package Initializer
===================================================

What: The composite product aggregate store: a product root plus up to ten
      independently-schemaed facets, created atomically and then updated
      facet by facet.

Architecture Note:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Services: registry → normalizer →  │  ← Validation, orchestration
    │  validation gate → product service  │
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
