"""Request/response schemas for user CRUD. The password hash is never part of a response."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from gatekeeper.schemas.roles import RoleOut

GovernmentIdType = Literal["cuil", "cuit", "dni", "lc", "le", "pas"]


def _normalize_email(v: object) -> object:
    return v.strip().lower() if isinstance(v, str) else v


def _strip(v: str | None) -> str | None:
    return v.strip() if isinstance(v, str) else v


class GovernmentId(BaseModel):
    type: GovernmentIdType
    number: str = Field(..., min_length=1, max_length=64)

    @field_validator("number")
    @classmethod
    def strip_number(cls, v: str) -> str:
        return v.strip()


class _ProfileFields(BaseModel):
    """Profile fields shared by create, replace and patch bodies."""

    model_config = ConfigDict(extra="forbid")

    username: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=64)
    government_id: GovernmentId | None = None
    born_date: date | None = None

    @field_validator("username", "phone")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return _strip(v)


class UserCreate(_ProfileFields):
    """Body for POST /users. role is a role name; password is checked against the policy."""

    email: EmailStr
    password: str = Field(..., min_length=1)
    role: str = Field(..., min_length=1, max_length=64)
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    is_active: bool = True

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return _normalize_email(v)

    @field_validator("role")
    @classmethod
    def normalize_role(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        return v.strip()


class UserReplace(_ProfileFields):
    """
    Body for PUT /users/{id}.

    Profile fields omitted here are cleared. email may be sent but must match the
    stored address; password and is_active change only when sent.
    """

    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=1)
    role: str = Field(..., min_length=1, max_length=64)
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    is_active: bool | None = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return _normalize_email(v)

    @field_validator("role")
    @classmethod
    def normalize_role(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str) -> str:
        return v.strip()


class UserPatch(_ProfileFields):
    """Body for PATCH /users/{id}; only fields present in the request are applied."""

    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=1)
    role: str | None = Field(default=None, min_length=1, max_length=64)
    first_name: str | None = Field(default=None, min_length=1, max_length=255)
    last_name: str | None = Field(default=None, min_length=1, max_length=255)
    is_active: bool | None = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return _normalize_email(v)

    @field_validator("role")
    @classmethod
    def normalize_role(cls, v: str | None) -> str | None:
        return v.strip().lower() if v is not None else None

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, v: str | None) -> str | None:
        return _strip(v)


class UserOut(BaseModel):
    """User as returned by reads and writes, with its role populated."""

    id: int
    email: str
    username: str | None = None
    first_name: str
    last_name: str
    phone: str | None = None
    government_id: GovernmentId | None = None
    born_date: date | None = None
    is_active: bool
    role: RoleOut
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, user: object) -> "UserOut":
        government_id = None
        if user.government_id_type and user.government_id_number:
            government_id = GovernmentId(
                type=user.government_id_type, number=user.government_id_number
            )
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
            phone=user.phone,
            government_id=government_id,
            born_date=user.born_date,
            is_active=user.is_active,
            role=RoleOut.from_model(user.role),
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class UserDeleted(BaseModel):
    id: int
    deleted: bool = True
