from .constants import Status


class AuthenticationError(Exception):
    """Raised when authentication fails."""

    status: Status = Status.JWT_INVALID_SIGNATURE

    def __init__(self, message: str | None = None, status: Status | None = None) -> None:
        if status is not None:
            self.status = status
        super().__init__(message or self.status.message)


class InvalidTokenError(AuthenticationError):
    """Raised when token is malformed or its signature does not verify."""
    pass


class TokenExpiredError(AuthenticationError):
    """Raised when token has expired."""
    status = Status.JWT_EXPIRED


class TokenMissingError(AuthenticationError):
    """Raised when no token was supplied."""
    status = Status.JWT_MISSED


class UnknownIssuerError(AuthenticationError):
    """Raised when the token issuer is not the configured one."""
    status = Status.JWT_UNKNOWN_ISSUER


class AudienceNotAllowedError(AuthenticationError):
    """Raised when none of the token audiences is accepted."""
    status = Status.AUDIENCE_NOT_ALLOWED


class InvalidPublicKeyError(ValueError):
    """Raised when a single JWK cannot be turned into a usable key."""

    def __init__(self, status: Status, message: str | None = None) -> None:
        self.status = status
        super().__init__(message or status.message)


class ConfigurationError(RuntimeError):
    """Raised when settings are missing or unusable."""
    pass
