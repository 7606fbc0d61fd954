"""Password hashing, password policy and JWT issuance/verification."""

import re
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt
import jwt.exceptions

from gatekeeper.core.config import SYMMETRIC_JWT_ALGORITHMS, Settings, get_settings
from gatekeeper.core.errors import (
    InvalidSignatureError,
    MalformedClaimsError,
    MalformedTokenError,
    MissingCredentialError,
    TokenExpiredError,
    WeakPasswordError,
)

# bcrypt only reads the first 72 bytes of its input.
BCRYPT_MAX_BYTES = 72

PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = BCRYPT_MAX_BYTES
PASSWORD_SPECIAL_CHARACTERS = "!@#$%^&*()-_=+[]{};:'\",.<>/?\\|`~"

BEARER_TOKEN_PATTERN = re.compile(r"^\s*Bearer\s+(\S+)")


@dataclass(frozen=True)
class ClaimSet:
    """Verified contents of an access token."""

    sub: str
    role: str
    iss: str
    exp: datetime
    iat: datetime | None = None
    jti: str | None = None


@dataclass(frozen=True)
class PasswordCheck:
    matches: bool
    account_active: bool


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    pw_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")
    # Longer inputs were never accepted at write time and would otherwise be truncated.
    if len(pw_bytes) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def check_password(
    plain_password: str | None, password_hash: str, is_active: bool
) -> PasswordCheck:
    """
    Compare a submitted password with the stored hash.

    The account state is reported separately so callers can tell a locked
    account with a correct password apart from a wrong password.
    Raises MissingCredentialError when no password was submitted.
    """
    if not plain_password:
        raise MissingCredentialError()
    return PasswordCheck(
        matches=verify_password(plain_password, password_hash),
        account_active=bool(is_active),
    )


def validate_password_strength(plain_password: str) -> None:
    """Enforce the password acceptance policy; raises WeakPasswordError naming the failed rule."""
    length = len(plain_password.encode("utf-8"))
    if length < PASSWORD_MIN_LEN or length > PASSWORD_MAX_LEN:
        raise WeakPasswordError(
            "length",
            f"Password must be between {PASSWORD_MIN_LEN} and {PASSWORD_MAX_LEN} characters",
        )
    if not any(c.isupper() for c in plain_password):
        raise WeakPasswordError("uppercase", "Password must contain at least one uppercase letter")
    if not any(c.islower() for c in plain_password):
        raise WeakPasswordError("lowercase", "Password must contain at least one lowercase letter")
    if not any(c.isdigit() for c in plain_password):
        raise WeakPasswordError("digit", "Password must contain at least one number")
    if not any(c in PASSWORD_SPECIAL_CHARACTERS for c in plain_password):
        raise WeakPasswordError(
            "symbol",
            f"Password must contain at least one of {PASSWORD_SPECIAL_CHARACTERS}",
        )


def _signing_key(settings: Settings) -> str:
    if settings.JWT_ALGORITHM in SYMMETRIC_JWT_ALGORITHMS:
        return settings.JWT_SECRET.get_secret_value()
    assert settings.JWT_PRIVATE_KEY is not None
    return settings.JWT_PRIVATE_KEY.get_secret_value()


def _verification_key(settings: Settings) -> str:
    if settings.JWT_ALGORITHM in SYMMETRIC_JWT_ALGORITHMS:
        return settings.JWT_SECRET.get_secret_value()
    assert settings.JWT_PUBLIC_KEY is not None
    return settings.JWT_PUBLIC_KEY


def create_access_token(
    sub: str | int,
    role: str,
    settings: Settings | None = None,
    now: datetime | None = None,
) -> str:
    """Create a JWT access token with sub (user id), role snapshot, iss, iat, exp and jti."""
    settings = settings or get_settings()
    now = now or datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": str(sub),
        "role": role,
        "iss": settings.JWT_ISSUER,
        "iat": now,
        "exp": expire,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, _signing_key(settings), algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings | None = None) -> ClaimSet:
    """
    Verify signature, algorithm, issuer and expiry, then read the claims.

    Raises TokenExpiredError, InvalidSignatureError, MalformedTokenError or
    MalformedClaimsError.
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            _verification_key(settings),
            algorithms=[settings.JWT_ALGORITHM],
            issuer=settings.JWT_ISSUER,
            options={"require": ["exp", "iss"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError() from e
    except jwt.MissingRequiredClaimError as e:
        if e.claim == "iss":
            raise InvalidSignatureError() from e
        raise MalformedClaimsError() from e
    except (jwt.exceptions.InvalidSubjectError, jwt.exceptions.InvalidJTIError) as e:
        raise MalformedClaimsError() from e
    except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError, jwt.InvalidIssuerError) as e:
        raise InvalidSignatureError() from e
    except jwt.DecodeError as e:
        raise MalformedTokenError() from e
    except jwt.PyJWTError as e:
        raise InvalidSignatureError() from e

    sub = payload.get("sub")
    role = payload.get("role")
    if not sub or not role or not isinstance(role, str):
        raise MalformedClaimsError()
    iat = payload.get("iat")
    return ClaimSet(
        sub=str(sub),
        role=role,
        iss=payload["iss"],
        exp=datetime.fromtimestamp(payload["exp"], UTC),
        iat=datetime.fromtimestamp(iat, UTC) if iat is not None else None,
        jti=payload.get("jti"),
    )


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from an `Authorization: Bearer <token>` header value."""
    match = BEARER_TOKEN_PATTERN.match(authorization or "")
    if match is None:
        raise MalformedTokenError("No bearer token provided")
    return match.group(1)
