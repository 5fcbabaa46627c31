"""Error Handlers — global exception handlers for the SourceGate API.

Invariants:
    - SourceGateError → structured JSON with code, message, severity, engine diagnostic
    - Malformed request bodies → the same OPTIONS_VALIDATION_ERROR envelope the
      facade raises for bad options, with the route's operation and field details
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Three-layer handler: domain (SourceGateError), validation (Pydantic), catch-all (Exception)
    - Route endpoint names match facade operation names, so `operation` in an error
      response reads the same whether the body or the options were rejected
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from sourcegate.core.errors import (
    ErrorContext, ErrorSeverity, OptionsValidationError, SourceGateError,
)

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_sourcegate_error_handler(app)
    _register_request_validation_handler(app)
    _register_unhandled_error_handler(app)


def _route_operation(request: Request) -> str | None:
    route = request.scope.get("route")
    if route is not None:
        return route.name
    return getattr(request.scope.get("endpoint"), "__name__", None)


def _register_sourcegate_error_handler(app: FastAPI) -> None:

    @app.exception_handler(SourceGateError)
    async def sourcegate_error_handler(request: Request, exc: SourceGateError):
        logger.error(
            f"SourceGateError: {exc.message}",
            extra={
                "error_code": exc.code,
                "operation": exc.context.operation,
                "file_path": exc.context.file_path,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_request_validation_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError,
    ):
        error = request_validation_error(exc, _route_operation(request))
        logger.warning(
            error.message,
            extra={"error_code": error.code, "operation": error.context.operation},
        )
        content = error.to_response()
        content["error"]["details"] = _field_details(exc)
        return JSONResponse(status_code=error.http_status, content=content)


def _register_unhandled_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        operation = _route_operation(request)
        logger.error(
            f"Unhandled exception in {operation or request.url.path}: {exc}",
            exc_info=True,
            extra={"operation": operation},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                    "category": "internal",
                    "severity": ErrorSeverity.CRITICAL.value,
                    "context": {"operation": operation},
                },
            },
        )


def request_validation_error(
    exc: RequestValidationError, operation: str | None,
) -> OptionsValidationError:
    """Map a rejected request body onto the facade's options error."""
    details = _field_details(exc)
    field = details[0]["field"] if details else "body"
    return OptionsValidationError(
        f"Invalid {operation or 'request'} body: {field}",
        field=field,
        context=ErrorContext(operation=operation),
    )


def _field_details(exc: RequestValidationError) -> list[dict]:
    # Drop the leading "body" segment so fields match the options model names
    return [
        {
            "field": ".".join(str(loc) for loc in e["loc"][1:]) or "body",
            "message": e["msg"],
            "type": e["type"],
        }
        for e in exc.errors()
    ]
