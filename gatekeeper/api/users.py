"""User CRUD endpoints. Mounted behind the authentication dependency."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from gatekeeper.api.deps import get_role_checks
from gatekeeper.core.database import get_db
from gatekeeper.core.roles import RoleChecks
from gatekeeper.schemas.users import UserCreate, UserDeleted, UserOut, UserPatch, UserReplace
from gatekeeper.services import users as user_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=list[UserOut])
def list_users(
    db: Annotated[Session, Depends(get_db)],
    checks: Annotated[RoleChecks, Depends(get_role_checks)],
    include_inactive: Annotated[bool, Query(description="Also return deactivated users")] = False,
) -> list[UserOut]:
    """List users with their role populated. Only active users unless include_inactive is set."""
    logger.info("list_users requested by user %s", checks.claims.sub)
    users = user_service.list_users(db, include_inactive=include_inactive)
    return [UserOut.from_model(u) for u in users]


@router.get("/{user_id}", response_model=UserOut)
def get_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> UserOut:
    return UserOut.from_model(user_service.get_user(db, user_id))


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    db: Annotated[Session, Depends(get_db)],
    checks: Annotated[RoleChecks, Depends(get_role_checks)],
) -> UserOut:
    """
    Create a user. role is a role name and must exist (404 otherwise).
    Only admins may pick a role other than client or create an inactive user.
    The password must satisfy the password policy; it is stored hashed.
    """
    logger.info("create_user requested by user %s", checks.claims.sub)
    return UserOut.from_model(user_service.create_user(db, body, actor=checks))


@router.put("/{user_id}", response_model=UserOut)
def replace_user(
    user_id: int,
    body: UserReplace,
    db: Annotated[Session, Depends(get_db)],
    checks: Annotated[RoleChecks, Depends(get_role_checks)],
) -> UserOut:
    """Replace a user's mutable fields. Admins, or the user themself; email cannot change."""
    return UserOut.from_model(user_service.replace_user(db, user_id, body, checks))


@router.patch("/{user_id}", response_model=UserOut)
def patch_user(
    user_id: int,
    body: UserPatch,
    db: Annotated[Session, Depends(get_db)],
    checks: Annotated[RoleChecks, Depends(get_role_checks)],
) -> UserOut:
    """Update only the fields sent. Same authorization rules as PUT."""
    return UserOut.from_model(user_service.patch_user(db, user_id, body, checks))


@router.delete("/{user_id}", response_model=UserDeleted)
def delete_user(
    user_id: int,
    db: Annotated[Session, Depends(get_db)],
    checks: Annotated[RoleChecks, Depends(get_role_checks)],
) -> UserDeleted:
    """Permanently delete a user. Admins, or the user themself."""
    user_service.delete_user(db, user_id, checks)
    return UserDeleted(id=user_id)
