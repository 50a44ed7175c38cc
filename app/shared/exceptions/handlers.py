"""
Exception handlers for the FastAPI application.

Translates the error taxonomy of the service into the standard error
envelope: validator rejections (400), request schema errors (422),
missing resources (404) and unhandled faults (500, logged with trace).
"""

import logging
from typing import Union, Dict, Any, List

from fastapi import Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..responses import (
    error_response,
    validation_error_response,
    ErrorDetail,
    HTTPStatusCodes
)
from ...core.request_context import current_request_id
from .api_exceptions import CatalogError
from .data_exceptions import DataValidationError
from .custom_exceptions import BaseAPIException

logger = logging.getLogger(__name__)


def _is_debug(request: Request) -> bool:
    settings = getattr(request.app.state, "settings", None)
    return bool(settings and settings.debug)


def _request_extra(request: Request, request_id: str) -> Dict[str, Any]:
    return {
        "request_id": request_id,
        "path": str(request.url.path),
        "method": request.method,
        "client_ip": request.client.host if request.client else "unknown"
    }


def _extract_validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """
    Extract and format validation errors from RequestValidationError.

    The leading location element ('body', 'path', 'query') is dropped so
    the field is reported by its own name.
    """
    errors = []
    for error in exc.errors():
        loc = error.get("loc", ())
        field_path = ".".join(str(part) for part in loc[1:])

        context: Dict[str, Any] = {"type": error.get("type"), "location": str(loc[0]) if loc else None}
        input_value = error.get("input")
        if input_value is not None:
            input_str = str(input_value)
            context["value"] = input_str[:100] + "..." if len(input_str) > 100 else input_str

        errors.append({
            "code": "VALIDATION_ERROR",
            "message": error.get("msg", "Invalid value"),
            "field": field_path or "body",
            "context": context
        })
    return errors


async def base_api_exception_handler(
    request: Request,
    exc: BaseAPIException
) -> JSONResponse:
    """Handle BaseAPIException and its subclasses (e.g. NotFoundException)."""
    request_id = current_request_id()

    logger.info(
        f"API Exception [{request_id}]: {exc.error_code} - {exc.detail}",
        extra={**_request_extra(request, request_id), "status_code": exc.status_code}
    )

    errors = exc.errors if exc.errors else [exc.to_error_detail()]

    return error_response(
        errors=errors,
        message=exc.detail,
        status_code=exc.status_code,
        headers=exc.headers,
        request_id=request_id,
        error_type=exc.error_code,
        path=str(request.url.path),
        method=request.method
    )


async def http_exception_handler(
    request: Request,
    exc: Union[HTTPException, StarletteHTTPException]
) -> JSONResponse:
    """
    Handle standard HTTP exceptions from FastAPI/Starlette.

    Covers unknown routes and wrong methods raised by the router itself.
    """
    request_id = current_request_id()

    logger.warning(
        f"HTTP Exception [{request_id}]: {exc.status_code} - {exc.detail}",
        extra=_request_extra(request, request_id)
    )

    error_code_map = {
        400: "BAD_REQUEST",
        404: "NOT_FOUND",
        405: "METHOD_NOT_ALLOWED",
        422: "VALIDATION_ERROR",
        500: "INTERNAL_SERVER_ERROR"
    }
    error_code = error_code_map.get(exc.status_code, f"HTTP_{exc.status_code}")

    errors = [
        ErrorDetail(
            code=error_code,
            message=str(exc.detail) if exc.detail else "An error occurred",
            context={"status_code": exc.status_code}
        )
    ]

    return error_response(
        errors=errors,
        message=str(exc.detail) if exc.detail else f"HTTP {exc.status_code} Error",
        status_code=exc.status_code,
        headers=getattr(exc, "headers", None),
        request_id=request_id,
        error_type=error_code,
        path=str(request.url.path),
        method=request.method
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation exceptions.

    Raised by FastAPI when the body or path does not match the declared
    schema, before any command or query is built.
    """
    request_id = current_request_id()
    errors = _extract_validation_errors(exc)

    logger.warning(
        f"Validation Error [{request_id}]: {len(errors)} validation errors",
        extra={**_request_extra(request, request_id), "fields": [e["field"] for e in errors]}
    )

    return validation_error_response(
        errors=errors,
        message=f"Validation failed for {len(errors)} field(s)",
        request_id=request_id,
        path=str(request.url.path),
        method=request.method
    )


async def data_validation_exception_handler(
    request: Request,
    exc: DataValidationError
) -> JSONResponse:
    """
    Handle validator rejections.

    One error entry is returned for each failing rule, naming its field.
    """
    request_id = current_request_id()

    logger.warning(
        f"Data Validation Error [{request_id}]: {', '.join(exc.field_names)} - {exc.message}",
        extra={**_request_extra(request, request_id), "fields": exc.field_names}
    )

    errors = [
        ErrorDetail(
            code=error.get("code", "DATA_VALIDATION_ERROR"),
            message=error.get("message", exc.message),
            field=error.get("field"),
            context={"validation_type": "business_rule"}
        )
        for error in exc.validation_errors
    ] or [
        ErrorDetail(
            code="DATA_VALIDATION_ERROR",
            message=exc.message,
            field=exc.field_name
        )
    ]

    return error_response(
        errors=errors,
        message=exc.message,
        status_code=HTTPStatusCodes.BAD_REQUEST,
        request_id=request_id,
        error_type="DATA_VALIDATION_ERROR",
        path=str(request.url.path),
        method=request.method
    )


async def catalog_exception_handler(
    request: Request,
    exc: CatalogError
) -> JSONResponse:
    """
    Handle catalog errors raised below the HTTP layer.

    Dispatch failures (no handler registered) and store failures are
    infrastructure faults and map to 500.
    """
    request_id = current_request_id()
    status_code = exc.status_code or HTTPStatusCodes.INTERNAL_SERVER_ERROR
    error_code = exc.error_code or "CATALOG_ERROR"

    logger.error(
        f"Catalog Error [{request_id}]: {error_code} - {exc.message}",
        extra={**_request_extra(request, request_id), "error_code": error_code}
    )

    message = exc.message
    context = exc.details or None
    if status_code >= HTTPStatusCodes.INTERNAL_SERVER_ERROR and not _is_debug(request):
        message = "An unexpected error occurred"
        context = None

    return error_response(
        errors=[ErrorDetail(code=error_code, message=message, context=context)],
        message=message,
        status_code=status_code,
        request_id=request_id,
        error_type=error_code,
        path=str(request.url.path),
        method=request.method
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle all unhandled exceptions.

    Catch-all for anything not matched by a specific handler. Logs the
    full stack trace.
    """
    request_id = current_request_id()

    logger.exception(
        f"Unhandled Exception [{request_id}]: {type(exc).__name__}: {str(exc)}",
        extra={**_request_extra(request, request_id), "exception_type": type(exc).__name__}
    )

    is_debug = _is_debug(request)
    message = f"{type(exc).__name__}: {str(exc)}" if is_debug else "An unexpected error occurred"

    error_context = {
        "exception_type": type(exc).__name__,
        "request_id": request_id
    }
    if is_debug:
        error_context["debug_message"] = str(exc)[:200]

    return error_response(
        errors=[
            ErrorDetail(
                code="INTERNAL_SERVER_ERROR",
                message=message,
                context=error_context
            )
        ],
        message="Internal server error",
        status_code=HTTPStatusCodes.INTERNAL_SERVER_ERROR,
        request_id=request_id,
        error_type="INTERNAL_SERVER_ERROR",
        path=str(request.url.path),
        method=request.method
    )


def register_exception_handlers(app) -> None:
    """Register handlers, most specific exception types first."""
    app.add_exception_handler(BaseAPIException, base_api_exception_handler)
    app.add_exception_handler(DataValidationError, data_validation_exception_handler)
    app.add_exception_handler(CatalogError, catalog_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)


__all__ = [
    "base_api_exception_handler",
    "http_exception_handler",
    "validation_exception_handler",
    "data_validation_exception_handler",
    "catalog_exception_handler",
    "general_exception_handler",
    "register_exception_handlers"
]
