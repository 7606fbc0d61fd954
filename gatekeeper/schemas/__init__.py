"""Pydantic request/response schemas."""

from gatekeeper.schemas.auth import LoginRequest, TokenResponse, UserSummary
from gatekeeper.schemas.errors import ErrorResponse
from gatekeeper.schemas.health import HealthResponse
from gatekeeper.schemas.roles import RoleCreate, RoleOut, RolePermissions
from gatekeeper.schemas.users import (
    GovernmentId,
    UserCreate,
    UserDeleted,
    UserOut,
    UserPatch,
    UserReplace,
)

__all__ = [
    "ErrorResponse",
    "GovernmentId",
    "HealthResponse",
    "LoginRequest",
    "RoleCreate",
    "RoleOut",
    "RolePermissions",
    "TokenResponse",
    "UserCreate",
    "UserDeleted",
    "UserOut",
    "UserPatch",
    "UserReplace",
    "UserSummary",
]
