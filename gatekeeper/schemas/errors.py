"""Uniform error body returned for every failed request."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    code: int = Field(..., description="HTTP status code")
    message: str = Field(..., description="Human-readable error message")
    errors: list[str] | None = Field(default=None, description="Per-field validation messages")
    stack: str | None = Field(default=None, description="Traceback; only outside production")
