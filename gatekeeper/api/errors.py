"""Error normalizer: renders every failure as {code, message, errors?, stack?}."""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from gatekeeper.core.config import get_settings
from gatekeeper.core.database import STORE_UNAVAILABLE_ERRORS
from gatekeeper.core.errors import ApiError, DuplicateKeyError, TokenExpiredError, UnavailableError
from gatekeeper.schemas.errors import ErrorResponse

logger = logging.getLogger(__name__)

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}
EXPIRED_CHALLENGE = {
    "WWW-Authenticate": 'Bearer error="invalid_token", error_description="token expired"'
}

# Fixed messages for framework-raised statuses (unknown route, wrong verb).
_HTTP_MESSAGES = {
    status.HTTP_404_NOT_FOUND: "Resource not found",
    status.HTTP_405_METHOD_NOT_ALLOWED: "Method not allowed",
}


def error_response(
    code: int,
    message: str,
    errors: list[str] | None = None,
    exc: BaseException | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the uniform error body; the traceback is attached outside production only."""
    body = ErrorResponse(code=code, message=message, errors=errors)
    if exc is not None and not get_settings().is_production:
        body.stack = "".join(traceback.format_exception(exc))
    return JSONResponse(
        status_code=code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def _log(request: Request, code: int, exc: BaseException) -> None:
    extra = {"path": request.url.path, "method": request.method, "status_code": code}
    if code >= 500:
        logger.error("Request failed: %s", exc, exc_info=exc, extra=extra)
    else:
        logger.info("Request rejected: %s", exc, extra=extra)


async def token_expired_handler(request: Request, exc: TokenExpiredError) -> JSONResponse:
    """Expired tokens short-circuit with a fixed 401 so clients know to log in again."""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"code": status.HTTP_401_UNAUTHORIZED, "message": "Token expired"},
        headers=EXPIRED_CHALLENGE,
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    _log(request, exc.status_code, exc)
    headers = BEARER_CHALLENGE if exc.status_code == status.HTTP_401_UNAUTHORIZED else None
    return error_response(exc.status_code, exc.message, exc.errors, exc, headers)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    _log(request, exc.status_code, exc)
    message = _HTTP_MESSAGES.get(exc.status_code) or str(exc.detail)
    return error_response(exc.status_code, message, exc=exc, headers=exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        errors.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    _log(request, status.HTTP_400_BAD_REQUEST, exc)
    return error_response(status.HTTP_400_BAD_REQUEST, "Validation error", errors, exc)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    err = DuplicateKeyError()
    _log(request, err.status_code, exc)
    return error_response(err.status_code, err.message, exc=exc)


async def store_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    err = UnavailableError()
    _log(request, err.status_code, exc)
    return error_response(err.status_code, err.message, exc=exc, headers={"Retry-After": "5"})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    _log(request, status.HTTP_500_INTERNAL_SERVER_ERROR, exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error", exc=exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the normalizer. Handlers are looked up by exception MRO, most specific first."""
    app.add_exception_handler(TokenExpiredError, token_expired_handler)
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    for exc_type in STORE_UNAVAILABLE_ERRORS:
        app.add_exception_handler(exc_type, store_unavailable_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
