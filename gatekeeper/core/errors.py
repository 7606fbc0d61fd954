"""Error taxonomy shared by services, dependencies and the HTTP error normalizer.

Every error carries the HTTP status it maps to, a client-facing message and an
optional list of per-field messages.
"""


class ApiError(Exception):
    """Base class for failures that render as a JSON error body."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, errors: list[str] | None = None) -> None:
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class BadRequestError(ApiError):
    status_code = 400
    default_message = "Bad request"


class MissingFieldError(BadRequestError):
    """Raised when a required body field is absent or empty."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Missing required field: {field}", errors=[f"{field} is required"])


class WeakPasswordError(BadRequestError):
    """Raised at write time when a password breaks the acceptance policy."""

    def __init__(self, rule: str, message: str) -> None:
        self.rule = rule
        super().__init__("Password does not meet the password policy", errors=[message])


class MissingCredentialError(BadRequestError):
    default_message = "Password is required"


class DuplicateKeyError(BadRequestError):
    default_message = "Duplicate key error"


class UnauthorizedError(ApiError):
    status_code = 401
    default_message = "Unauthorized"


class InvalidCredentialsError(UnauthorizedError):
    default_message = "Invalid email or password"


class TokenError(UnauthorizedError):
    """Base for bearer token verification failures."""

    default_message = "Invalid token"


class MalformedTokenError(TokenError):
    default_message = "Malformed token"


class InvalidSignatureError(TokenError):
    default_message = "Invalid token"


class TokenExpiredError(TokenError):
    default_message = "Token expired"


class MalformedClaimsError(TokenError):
    default_message = "Invalid token payload"


class ForbiddenError(ApiError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Resource not found"


class MethodNotAllowedError(ApiError):
    status_code = 405
    default_message = "Method not allowed"


class AccountLockedError(ApiError):
    status_code = 423
    default_message = "Account is locked"


class UnavailableError(ApiError):
    """Store unreachable or timed out; clients may retry."""

    status_code = 503
    default_message = "Database connection error"
