"""
DSM Gateway — Middleware Package
==================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs, error bodies and the response header
    2. Logging: access line with status and duration, tagged with the request ID
    3. GZip / CORS: FastAPI's stock middleware
"""
