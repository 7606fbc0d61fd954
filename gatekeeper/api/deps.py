"""Authentication and authorization dependencies shared by protected routes."""

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from gatekeeper.core.errors import (
    ForbiddenError,
    InvalidSignatureError,
    TokenError,
    TokenExpiredError,
    UnauthorizedError,
)
from gatekeeper.core.roles import RoleChecks, RoleName
from gatekeeper.core.security import ClaimSet, decode_access_token, extract_bearer_token

logger = logging.getLogger(__name__)

# Only documents the bearer scheme in OpenAPI; the header is parsed by get_current_claims.
security = HTTPBearer(auto_error=False)


def client_address(request: Request) -> str:
    """First X-Forwarded-For hop, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def get_current_claims(
    request: Request,
    _credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> ClaimSet:
    """
    Dependency: require a valid Bearer JWT and return its verified claims.

    Expired tokens propagate as TokenExpiredError, which has its own handler so
    clients can tell "log in again" apart from other 401s. Everything else is a
    plain UnauthorizedError.
    """
    authorization = request.headers.get("authorization")
    if not authorization:
        logger.info("Missing authorization header", extra={"path": request.url.path})
        raise UnauthorizedError("No token provided")

    try:
        token = extract_bearer_token(authorization)
        claims = decode_access_token(token)
    except TokenExpiredError:
        logger.info("Expired token", extra={"path": request.url.path})
        raise
    except InvalidSignatureError as e:
        logger.warning(
            "Suspicious access attempt from ip=%s",
            client_address(request),
            extra={"path": request.url.path, "reason": "invalid signature, algorithm or issuer"},
        )
        raise UnauthorizedError(e.message) from e
    except TokenError as e:
        logger.info("Rejected token: %s", e.message, extra={"path": request.url.path})
        raise UnauthorizedError(e.message) from e

    logger.debug("User %s authenticated", claims.sub)
    return claims


def get_role_checks(
    claims: Annotated[ClaimSet, Depends(get_current_claims)],
) -> RoleChecks:
    """Dependency: role predicates for the authenticated caller."""
    return RoleChecks.from_claims(claims)


def require_roles(*roles: RoleName | str) -> Callable[..., RoleChecks]:
    """Dependency factory: 403 unless the caller holds one of roles."""

    def checker(checks: Annotated[RoleChecks, Depends(get_role_checks)]) -> RoleChecks:
        if not checks.any_of(*roles):
            raise ForbiddenError("Access denied")
        return checks

    return checker
