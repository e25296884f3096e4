# Services package init
"""
Atelier Catalog — Services Layer
==================================

Service Inventory (leaf-first):
    - facet_registry:  facet names, field sets and storage rules
    - normalizer:      pure coercion of raw client fields to column values
    - validation_gate: name/slug uniqueness and reference resolution
    - product_service: transactional create, facet upsert, reads, statistics

Services never touch HTTP; they receive an AsyncSession and raise
CatalogError subclasses.
"""
