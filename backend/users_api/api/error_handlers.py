"""Error Handlers — map every failure to the {success: false, message, errors?} envelope.

Invariants:
    - UsersApiError → its own http_status and to_response() body
    - RequestValidationError → 400 "Invalid JSON format" for unparseable bodies,
      400 "Validation failed" with field errors otherwise
    - Unknown route → 404 "Route METHOD /path not found"
    - Exception (catch-all) → 500; error text and stack only when APP_ENV=development
    - Every error is logged with method and path before the response is built
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from users_api.config import get_settings
from users_api.core.errors import (
    FieldError, InternalError, MalformedBodyError, UsersApiError, ValidationError,
)

logger = logging.getLogger(__name__)

# FastAPI prefixes locations with where the value came from
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _request_extra(request: Request, status_code: int, code: str) -> dict:
    return {
        "method": request.method,
        "path": request.url.path,
        "status_code": status_code,
        "error_code": code,
    }


def error_response(request: Request, exc: UsersApiError) -> JSONResponse:
    """Log a users API error and render its envelope."""
    extra = _request_extra(request, exc.http_status, exc.code)
    if exc.http_status >= 500:
        logger.error(f"{exc.code}: {exc.message} ({exc.detail})", extra=extra)
    else:
        logger.warning(f"{exc.code}: {exc.message}", extra=extra)
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_response(include_detail=get_settings().is_development),
    )


def validation_error_response(
    request: Request, errors: list[FieldError] | tuple[FieldError, ...],
) -> JSONResponse:
    return error_response(request, ValidationError(list(errors)))


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_users_api_error_handler(app)
    _register_request_validation_handler(app)
    _register_http_error_handler(app)
    _register_generic_error_handler(app)


def _register_users_api_error_handler(app: FastAPI) -> None:

    @app.exception_handler(UsersApiError)
    async def users_api_error_handler(request: Request, exc: UsersApiError):
        return error_response(request, exc)


def _register_request_validation_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Malformed JSON and framework-level shape errors."""
        errors = exc.errors()
        if any(e["type"] == "json_invalid" for e in errors):
            detail = "; ".join(str(e.get("ctx", {}).get("error", "")) for e in errors)
            return error_response(request, MalformedBodyError(detail or None))
        return validation_error_response(request, _build_field_errors(errors))


def _register_http_error_handler(app: FastAPI) -> None:

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            message = f"Route {request.method} {request.url.path} not found"
        else:
            message = str(exc.detail)
        logger.warning(
            message, extra=_request_extra(request, exc.status_code, "HTTP_ERROR"),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": message},
            headers=getattr(exc, "headers", None),
        )


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — detail only leaves the process in development."""
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {exc}",
            exc_info=True,
            extra=_request_extra(request, 500, "INTERNAL_ERROR"),
        )
        development = get_settings().is_development
        content = InternalError(detail=str(exc)).to_response(include_detail=development)
        if development:
            content["stack"] = "".join(traceback.format_exception(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content,
        )


def _build_field_errors(errors: list[dict]) -> list[FieldError]:
    field_errors = []
    for e in errors:
        loc = list(e["loc"])
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        field = ".".join(str(part) for part in loc) or "body"
        field_errors.append(FieldError(field=field, message=e["msg"]))
    return field_errors
