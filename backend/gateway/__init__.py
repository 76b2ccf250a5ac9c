"""
DSM Gateway — Application Package Initializer
===============================================

HTTP gateway over three independent stores:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  /usuarios  /produtos  /buckets
    ├─────────────────────────────────────┤
    │        Services (store calls)       │  UserService ProductService BucketService
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  SQLAlchemy Product + Pydantic contracts
    ├─────────────────────────────────────┤
    │     Drivers (built at startup)      │  pymongo async · SQLAlchemy/aiomysql · boto3
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
