# Routes package init
"""
Atelier Catalog — API Routes Package
======================================

Route Inventory:
    - products.py: /api/products and its facet, statistic and views sub-routes
    - health.py:   GET /health (database connectivity)

Routes stay thin: they extract request data, call ProductService, and wrap
the result in a response schema. Business rules live in the services.
"""
