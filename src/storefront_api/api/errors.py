"""
storefront_api.api.errors

Error normalization for the API boundary.

Responsibilities:
- Map the error taxonomy in `storefront_api.errors` to status codes and bodies.
- Log processing and not-found failures (message + traceback) before rendering.
- Fold gateway failures into the order's own errors (`invalid_resource`).

| Exception                          | Status | Body                         |
|------------------------------------|--------|------------------------------|
| ParameterMissing / RecordInvalid   | 422    | {"exception": message}       |
| RecordNotFound                     | 404    | not_found                    |
| AccessDenied                       | 401    | unauthorized                 |
| GatewayError                       | 422    | invalid_resource             |
| MustSpecifyApiKey                  | 401    | must_specify_api_key         |
| InvalidApiKey                      | 401    | invalid_api_key              |
| anything else                      | 500    | {"error": internal error}    |
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError
from starlette.requests import Request
from starlette.responses import Response
from starlette.status import (
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from storefront_api.api.negotiation import content_type_for, render, requested_format
from storefront_api.errors import (
    AccessDenied,
    GatewayError,
    InvalidApiKey,
    MustSpecifyApiKey,
    ParameterMissing,
    RecordInvalid,
    RecordNotFound,
)
from storefront_api.observability.logging import get_logger

log = get_logger(__name__)

NOT_FOUND = "The resource you were looking for could not be found."
UNAUTHORIZED = "You are not authorized to perform that action."
INVALID_RESOURCE = "Invalid resource. Please fix errors and try again."
INTERNAL_ERROR = "Internal server error."

# Spelled out: starlette renamed its 422 constant between releases.
HTTP_422_UNPROCESSABLE = 422


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ParameterMissing, error_during_processing)
    app.add_exception_handler(RecordInvalid, error_during_processing)
    app.add_exception_handler(IntegrityError, error_during_processing)
    app.add_exception_handler(RequestValidationError, request_validation_error)
    app.add_exception_handler(RecordNotFound, not_found)
    app.add_exception_handler(AccessDenied, unauthorized)
    app.add_exception_handler(GatewayError, gateway_error)
    app.add_exception_handler(MustSpecifyApiKey, must_specify_api_key)
    app.add_exception_handler(InvalidApiKey, invalid_api_key)
    # Served by the outermost error middleware, outside `ContentTypeMiddleware`.
    app.add_exception_handler(Exception, internal_error)


def _render(request: Request, body: dict[str, Any], status_code: int) -> Response:
    return render(body, fmt=requested_format(request), status_code=status_code, root="error")


def unprocessable_entity(request: Request, message: str) -> Response:
    return _render(request, {"exception": message}, HTTP_422_UNPROCESSABLE)


def invalid_resource(request: Request, resource: Any) -> Response:
    return _render(
        request,
        {"error": INVALID_RESOURCE, "errors": resource.errors},
        HTTP_422_UNPROCESSABLE,
    )


async def error_during_processing(request: Request, exc: Exception) -> Response:
    log.error("error_during_processing", error=str(exc), exc_info=exc)
    return unprocessable_entity(request, str(exc))


async def request_validation_error(request: Request, exc: RequestValidationError) -> Response:
    message = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    log.error("error_during_processing", error=message, exc_info=exc)
    return unprocessable_entity(request, message)


async def not_found(request: Request, exc: RecordNotFound) -> Response:
    log.warning("not_found", error=str(exc), exc_info=exc)
    return _render(request, {"error": NOT_FOUND}, HTTP_404_NOT_FOUND)


async def unauthorized(request: Request, exc: AccessDenied) -> Response:
    return _render(request, {"error": UNAUTHORIZED}, HTTP_401_UNAUTHORIZED)


async def gateway_error(request: Request, exc: GatewayError) -> Response:
    order = exc.order
    if order is None:
        ctx = getattr(request.state, "api_context", None)
        order = getattr(ctx, "order", None)
    if order is None:
        log.error("gateway_error", error=str(exc), exc_info=exc)
        return unprocessable_entity(request, str(exc))

    order.add_error("base", str(exc))
    log.warning("gateway_error", error=str(exc), order_number=order.number)
    return invalid_resource(request, order)


async def must_specify_api_key(request: Request, exc: MustSpecifyApiKey) -> Response:
    return _render(request, {"error": str(exc)}, HTTP_401_UNAUTHORIZED)


async def invalid_api_key(request: Request, exc: InvalidApiKey) -> Response:
    return _render(request, {"error": str(exc)}, HTTP_401_UNAUTHORIZED)


async def internal_error(request: Request, exc: Exception) -> Response:
    log.error("unhandled_error", error=str(exc), exc_info=exc)
    fmt = requested_format(request)
    response = _render(request, {"error": INTERNAL_ERROR}, HTTP_500_INTERNAL_SERVER_ERROR)
    content_type = content_type_for(fmt)
    if content_type is not None:
        response.headers["content-type"] = content_type
    return response
