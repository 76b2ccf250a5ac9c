"""
DSM Gateway — Request-Scoped Event Logging
============================================

What:  The two logging entry points used by the route groups:
       log_info(message, request, payload) and log_error(message, request, error).
How:   Each call writes one stdlib logging record on the "gateway.events"
       logger. Method, path and request ID come from the originating request;
       the payload (or error) is rendered to a JSON-safe value and attached
       both to the message and to the record's `extra` fields.
Who:   Route handlers on success, exception handlers on failure.
"""

import json
import logging
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from starlette.requests import Request

from gateway.middleware.request_id import current_request_id

logger = logging.getLogger("gateway.events")

# Payload text beyond this is cut in the message; `extra` keeps the full value
MAX_PAYLOAD_CHARS = 2000


def _request_fields(request: Optional[Request]) -> Dict[str, Any]:
    if request is None:
        return {"request_id": current_request_id(), "method": None, "path": None}
    return {
        "request_id": current_request_id(request),
        "method": request.method,
        "path": request.url.path,
    }


def _render(value: Any) -> Any:
    try:
        return jsonable_encoder(value)
    except (TypeError, ValueError):
        return repr(value)


def _truncate(text: str) -> str:
    if len(text) <= MAX_PAYLOAD_CHARS:
        return text
    return text[:MAX_PAYLOAD_CHARS] + "...(truncated)"


def describe_error(error: BaseException) -> Dict[str, Any]:
    """
    JSON-safe description of an exception.

    botocore ClientError exposes the service's error code, message, HTTP
    status and request id through `.response`; those fields are kept so the
    bucket routes can return them as `details`. Any other exception is
    reduced to its type and message.
    """
    response = getattr(error, "response", None)
    if isinstance(response, dict) and "Error" in response:
        err = response.get("Error", {})
        meta = response.get("ResponseMetadata", {})
        details = {
            "code": err.get("Code"),
            "message": err.get("Message") or str(error),
            "statusCode": meta.get("HTTPStatusCode"),
            "requestId": meta.get("RequestId"),
        }
        for key in ("BucketName", "Key"):
            if key in err:
                details[key] = err[key]
        return details
    return {"name": type(error).__name__, "message": str(error)}


def log_info(message: str, request: Optional[Request] = None, payload: Any = None) -> None:
    fields = _request_fields(request)
    rendered = _render(payload) if payload is not None else None
    if rendered is None:
        logger.info(
            "%s | %s %s [%s]",
            message, fields["method"], fields["path"], fields["request_id"],
            extra=fields,
        )
        return
    logger.info(
        "%s | %s %s [%s] payload=%s",
        message, fields["method"], fields["path"], fields["request_id"],
        _truncate(json.dumps(rendered, ensure_ascii=False, default=str)),
        extra={**fields, "payload": rendered},
    )


def log_error(
    message: str,
    request: Optional[Request] = None,
    error: Optional[BaseException] = None,
) -> None:
    """
    Log a failure with its request context.

    The traceback is attached when `error` is an exception, so the driver
    error that the caller never sees is available server-side.
    """
    fields = _request_fields(request)
    if error is None:
        logger.error(
            "%s | %s %s [%s]",
            message, fields["method"], fields["path"], fields["request_id"],
            extra=fields,
        )
        return
    described = describe_error(error)
    logger.error(
        "%s | %s %s [%s] error=%s",
        message, fields["method"], fields["path"], fields["request_id"],
        _truncate(json.dumps(described, ensure_ascii=False, default=str)),
        exc_info=(type(error), error, error.__traceback__),
        extra={**fields, "error": described},
    )
