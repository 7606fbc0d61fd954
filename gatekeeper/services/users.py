"""User reads and writes against the credential store.

Passwords are checked against the policy and hashed here, explicitly, at the
write boundary. Unique-constraint violations surface as DuplicateKeyError.
"""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gatekeeper.core.errors import (
    BadRequestError,
    DuplicateKeyError,
    ForbiddenError,
    NotFoundError,
)
from gatekeeper.core.roles import RoleChecks, RoleName
from gatekeeper.core.security import hash_password, validate_password_strength
from gatekeeper.models import User
from gatekeeper.schemas.users import UserCreate, UserPatch, UserReplace
from gatekeeper.services.roles import get_role_by_name

logger = logging.getLogger(__name__)

# Role a non-admin may give the users they create.
DEFAULT_ROLE = RoleName.CLIENT.value

# Constraint fragments reported by SQLite and PostgreSQL -> client-facing field name.
_UNIQUE_FIELDS = (
    ("government_id", "governmentId"),
    ("email", "email"),
    ("username", "username"),
)


def _duplicate_key_error(exc: IntegrityError) -> DuplicateKeyError:
    detail = str(exc.orig).lower()
    for fragment, field in _UNIQUE_FIELDS:
        if fragment in detail:
            return DuplicateKeyError(f"Duplicate key error: {field} already in use")
    return DuplicateKeyError()


def _commit(db: Session) -> None:
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise _duplicate_key_error(e) from e


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def list_users(db: Session, include_inactive: bool = False) -> list[User]:
    query = db.query(User)
    if not include_inactive:
        query = query.filter(User.is_active.is_(True))
    return query.order_by(User.id).all()


def create_user(db: Session, body: UserCreate, actor: RoleChecks | None = None) -> User:
    """
    Create a user after checking its role exists and its password meets the policy.

    actor is the calling user for API requests; None means a trusted local
    caller (seed, CLI). Non-admin actors may only create active users with the
    default role, the same rule updates apply to role and is_active.

    Raises ForbiddenError, NotFoundError for an unknown role, WeakPasswordError,
    DuplicateKeyError.
    """
    if actor is not None and not actor.is_admin:
        if body.role != DEFAULT_ROLE:
            raise ForbiddenError("Only admins can assign a role other than the default")
        if not body.is_active:
            raise ForbiddenError("Only admins can create inactive users")

    role = get_role_by_name(db, body.role)
    if role is None:
        raise NotFoundError("Role not found")
    validate_password_strength(body.password)

    user = User(
        email=body.email,
        username=body.username,
        password_hash=hash_password(body.password),
        role_id=role.id,
        first_name=body.first_name,
        last_name=body.last_name,
        phone=body.phone,
        born_date=body.born_date,
        is_active=body.is_active,
    )
    if body.government_id is not None:
        user.government_id_type = body.government_id.type
        user.government_id_number = body.government_id.number
    db.add(user)
    _commit(db)
    db.refresh(user)
    logger.info("User created", extra={"user_id": user.id, "role_name": role.name})
    return user


def _apply_changes(db: Session, user: User, changes: dict[str, Any], actor: RoleChecks) -> None:
    email = changes.pop("email", None)
    if email is not None and email != user.email:
        raise BadRequestError("Email cannot be changed", errors=["email is immutable"])

    if "role" in changes:
        role_name = changes.pop("role")
        if role_name is None:
            raise BadRequestError("Role is required", errors=["role must not be null"])
        if role_name != user.role.name:
            if not actor.is_admin:
                raise ForbiddenError("Only admins can change a user's role")
            role = get_role_by_name(db, role_name)
            if role is None:
                raise BadRequestError("Role not found", errors=[f"unknown role: {role_name}"])
            user.role_id = role.id
            user.role = role

    if "is_active" in changes:
        is_active = changes.pop("is_active")
        if is_active is None:
            raise BadRequestError("is_active must be a boolean", errors=["is_active must not be null"])
        if is_active != user.is_active:
            if not actor.is_admin:
                raise ForbiddenError("Only admins can activate or deactivate users")
            user.is_active = is_active

    password = changes.pop("password", None)
    if password is not None:
        validate_password_strength(password)
        user.password_hash = hash_password(password)

    if "government_id" in changes:
        government_id = changes.pop("government_id")
        user.government_id_type = government_id["type"] if government_id else None
        user.government_id_number = government_id["number"] if government_id else None

    for field in ("first_name", "last_name"):
        if field in changes and changes[field] is None:
            raise BadRequestError(f"{field} must not be null", errors=[f"{field} is required"])
    for field, value in changes.items():
        setattr(user, field, value)


def replace_user(db: Session, user_id: int, body: UserReplace, actor: RoleChecks) -> User:
    """Full replace of a user's mutable fields (PUT). Caller must be admin or the user."""
    if not actor.is_admin_or_self(user_id):
        raise ForbiddenError("Unauthorized")
    user = get_user(db, user_id)
    changes = body.model_dump()
    for optional in ("email", "password", "is_active"):
        if changes.get(optional) is None:
            changes.pop(optional, None)
    _apply_changes(db, user, changes, actor)
    _commit(db)
    db.refresh(user)
    logger.info("User replaced", extra={"user_id": user.id})
    return user


def patch_user(db: Session, user_id: int, body: UserPatch, actor: RoleChecks) -> User:
    """Partial update (PATCH): only fields present in the request body are applied."""
    if not actor.is_admin_or_self(user_id):
        raise ForbiddenError("Unauthorized")
    user = get_user(db, user_id)
    _apply_changes(db, user, body.model_dump(exclude_unset=True), actor)
    _commit(db)
    db.refresh(user)
    logger.info("User patched", extra={"user_id": user.id})
    return user


def delete_user(db: Session, user_id: int, actor: RoleChecks) -> None:
    """Hard-delete a user. Uses the same admin-or-self rule as updates."""
    if not actor.is_admin_or_self(user_id):
        raise ForbiddenError("Unauthorized")
    user = get_user(db, user_id)
    db.delete(user)
    _commit(db)
    logger.info("User deleted", extra={"user_id": user_id})
