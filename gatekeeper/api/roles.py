"""Role endpoints: list for any authenticated caller, create for admins."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gatekeeper.api.deps import require_roles
from gatekeeper.core.database import get_db
from gatekeeper.core.roles import RoleChecks, RoleName
from gatekeeper.schemas.roles import RoleCreate, RoleOut
from gatekeeper.services import roles as role_service

router = APIRouter()


@router.get("", response_model=list[RoleOut])
def list_roles(db: Annotated[Session, Depends(get_db)]) -> list[RoleOut]:
    return [RoleOut.from_model(r) for r in role_service.list_roles(db)]


@router.post("", response_model=RoleOut, status_code=status.HTTP_201_CREATED)
def create_role(
    body: RoleCreate,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[RoleChecks, Depends(require_roles(RoleName.ADMIN))],
) -> RoleOut:
    """Create a role (admin only). Names are unique and stored lower-cased."""
    return RoleOut.from_model(role_service.create_role(db, body))
