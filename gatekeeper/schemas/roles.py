"""Request/response schemas for roles."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RolePermissions(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    read: bool = False
    write: bool = False
    update: bool = False
    delete: bool = False


class RoleCreate(BaseModel):
    """Body for POST /roles."""

    name: str = Field(..., min_length=1, max_length=64)
    description: str | None = Field(default=None, max_length=255)
    permissions: RolePermissions = Field(default_factory=RolePermissions)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("description")
    @classmethod
    def strip_description(cls, v: str | None) -> str | None:
        return v.strip() if v is not None else None


class RoleOut(BaseModel):
    """Role as returned to clients, populated on user reads."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    permissions: RolePermissions
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, role: object) -> "RoleOut":
        return cls(
            id=role.id,
            name=role.name,
            description=role.description,
            permissions=RolePermissions(
                read=role.can_read,
                write=role.can_write,
                update=role.can_update,
                delete=role.can_delete,
            ),
            is_active=role.is_active,
            created_at=role.created_at,
            updated_at=role.updated_at,
        )
