"""Request/response schemas for the login endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Credentials for login. Both fields are checked by the handler so a missing one is a 400."""

    email: str | None = Field(default=None, description="Account email")
    password: str | None = Field(default=None, description="Account password")


class UserSummary(BaseModel):
    """User fields returned alongside a token (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    role: str = Field(..., description="Role name at the time the token was issued")
    first_name: str
    last_name: str


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")
    token_type: str = Field(default="bearer", description="Token type")
    user: UserSummary
