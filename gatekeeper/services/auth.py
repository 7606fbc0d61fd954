"""Login: authenticate email/password and issue an access token."""

import logging

from sqlalchemy.orm import Session

from gatekeeper.core.config import Settings
from gatekeeper.core.errors import AccountLockedError, InvalidCredentialsError, MissingFieldError
from gatekeeper.core.security import check_password, create_access_token
from gatekeeper.models import User
from gatekeeper.schemas.auth import TokenResponse, UserSummary
from gatekeeper.services.users import get_user_by_email

logger = logging.getLogger(__name__)


def authenticate(db: Session, email: str | None, password: str | None) -> User:
    """
    Return the user for valid credentials.

    Unknown email and wrong password raise the same InvalidCredentialsError;
    only the logs tell them apart. A correct password on an inactive account
    raises AccountLockedError.
    """
    if not email or not email.strip():
        raise MissingFieldError("email")
    if not password:
        raise MissingFieldError("password")

    user = get_user_by_email(db, email)
    if user is None:
        logger.info("Login failed: user not found")
        raise InvalidCredentialsError()

    result = check_password(password, user.password_hash, user.is_active)
    if not result.matches:
        logger.info("Login failed: invalid password", extra={"user_id": user.id})
        raise InvalidCredentialsError()
    if not result.account_active:
        logger.info("Login refused: account locked", extra={"user_id": user.id})
        raise AccountLockedError()
    return user


def issue_login_token(user: User, settings: Settings | None = None) -> TokenResponse:
    """Sign a token for user with a snapshot of its current role name."""
    token = create_access_token(sub=user.id, role=user.role.name, settings=settings)
    logger.info("Issued access token", extra={"user_id": user.id, "role_name": user.role.name})
    return TokenResponse(
        token=token,
        user=UserSummary(
            id=user.id,
            email=user.email,
            role=user.role.name,
            first_name=user.first_name,
            last_name=user.last_name,
        ),
    )
