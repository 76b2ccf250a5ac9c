# Routes package init
"""
DSM Gateway — API Routes Package
==================================

Route Inventory:
    - users.py:    /usuarios                        (MongoDB CRUD)
    - products.py: /produtos                        (MySQL CRUD)
    - buckets.py:  /buckets                         (S3 list/upload/delete/replicate)
    - health.py:   GET /health                      (database probes)

Routes stay thin: they read the request, call the matching service and
shape the response. Errors propagate to the global exception handlers.
"""
