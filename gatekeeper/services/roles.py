"""Role lookups and creation against the credential store."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gatekeeper.core.errors import DuplicateKeyError
from gatekeeper.models import Role
from gatekeeper.schemas.roles import RoleCreate

logger = logging.getLogger(__name__)


def get_role_by_name(db: Session, name: str) -> Role | None:
    return db.query(Role).filter(Role.name == name.strip().lower()).first()


def list_roles(db: Session) -> list[Role]:
    return db.query(Role).order_by(Role.id).all()


def create_role(db: Session, body: RoleCreate) -> Role:
    """Insert a role; a name already in use raises DuplicateKeyError."""
    role = Role(
        name=body.name,
        description=body.description,
        can_read=body.permissions.read,
        can_write=body.permissions.write,
        can_update=body.permissions.update,
        can_delete=body.permissions.delete,
    )
    db.add(role)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise DuplicateKeyError(f"Duplicate key error: role '{body.name}' already exists") from e
    db.refresh(role)
    logger.info("Role created", extra={"role_id": role.id, "role_name": role.name})
    return role


def ensure_role(db: Session, name: str, description: str | None = None) -> tuple[Role, bool]:
    """Return the named role, creating it when missing. The flag is True when it was created."""
    role = get_role_by_name(db, name)
    if role is not None:
        return role, False
    return create_role(db, RoleCreate(name=name, description=description)), True
