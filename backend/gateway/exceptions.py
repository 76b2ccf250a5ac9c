"""
DSM Gateway — Custom Exception Hierarchy
==========================================

What:  Application-specific exceptions for the three route groups.
How:   Each exception carries a public message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return JSON error responses with the matching HTTP status code.
Who:   Raised by services and routes; caught by global handlers.

Exception Hierarchy:
    GatewayError (base)
    ├── ValidationError   → 400 Bad Request
    ├── NotFoundError     → 404 Not Found
    ├── DatabaseError     → 500 Internal Server Error (details logged only)
    └── StorageError      → 500 Internal Server Error (details returned)

Disclosure rules:
    DatabaseError.context is logged server-side and never serialized.
    StorageError.details, when set, is serialized into the response body, matching the
    object-storage endpoints' contract of echoing the storage API error.
"""

from typing import Any, Dict, Optional


class GatewayError(Exception):
    """
    Base exception for all gateway errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "Erro interno",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GatewayError):
    """
    Raised when client input is missing something the route needs.

    When:    POST /buckets/{bucketName}/upload without a `file` field.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Requisição inválida",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(GatewayError):
    """
    Raised when the addressed user or product does not exist.

    The message is the exact text returned to the caller
    (e.g. "Usuário não encontrado").
    """

    def __init__(
        self,
        message: str = "Recurso não encontrado",
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class DatabaseError(GatewayError):
    """
    Raised when a document-store or relational-store call fails.

    When:    Malformed ObjectId, lost connection, driver error, constraint error.
    HTTP:    500 Internal Server Error

    `operation` names the failed step for the log line
    (e.g. "Erro ao criar usuário"); `message` is the static text the caller sees.
    """

    def __init__(
        self,
        message: str = "Erro interno",
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.operation = operation or message


class StorageError(GatewayError):
    """
    Raised when an object-storage call fails.

    When:    list/put/get/delete against the S3 API raised ClientError or
             BotoCoreError.
    HTTP:    500 Internal Server Error. Upload, delete and replicate put the
             storage API error in the body as `details`; a list failure
             carries no details and returns the static message only.
    """

    def __init__(
        self,
        message: str = "Erro no armazenamento de objetos",
        details: Optional[Dict[str, Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.details = details
