# Services package init
"""
DSM Gateway — Services Layer
==============================

What:  One service per route group, sitting between routes (HTTP) and the
       external stores.
How:   Services receive their store handle (collection, session, S3 client)
       from the caller and translate driver errors into gateway exceptions.

Service Inventory:
    - UserService:    MongoDB collection `usuarios`
    - ProductService: MySQL table `produtos`
    - BucketService:  S3 buckets and replication
"""
