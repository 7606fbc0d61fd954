"""Login endpoint: exchange email and password for a JWT."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gatekeeper.core.database import get_db
from gatekeeper.schemas.auth import LoginRequest, TokenResponse
from gatekeeper.schemas.errors import ErrorResponse
from gatekeeper.services.auth import authenticate, issue_login_token

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Missing email or password"},
        401: {"model": ErrorResponse, "description": "Invalid email or password"},
        423: {"model": ErrorResponse, "description": "Account is locked"},
    },
)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns a JWT and a summary of the user.
    Include the token in the Authorization header as: Bearer <token>
    """
    user = authenticate(db, body.email, body.password)
    return issue_login_token(user)
