from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple

from ...domain.entities import JwtPayload
from ...domain.exceptions import (
    AudienceNotAllowedError,
    AuthenticationError,
    TokenExpiredError,
    TokenMissingError,
)
from ...domain.ports import TokenDecoder
from ...domain.token import Jwt
from ...log import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class AuthenticateTokenUseCase:
    """
    Application use case:
    - Decode and verify a token via TokenDecoder port
    - Check expiry and audience
    - Map the verified token -> JwtPayload

    `audiences` lists the audiences this service accepts; when empty any
    audience (or none) is accepted. `exp` of 0 means the token never
    expires.
    """

    token_decoder: TokenDecoder
    audiences: Tuple[str, ...] = ()
    leeway_seconds: int = 0
    clock: Callable[[], float] = field(default_factory=lambda: time.time)

    def execute(self, token: Optional[str]) -> JwtPayload:
        """
        Authenticate a token and return a JwtPayload.

        Raises:
            TokenMissingError
            TokenExpiredError
            AudienceNotAllowedError
            InvalidTokenError
            UnknownIssuerError
            AuthenticationError
        """
        if not token:
            raise TokenMissingError()

        try:
            jwt = self.token_decoder.decode(token)
        except AuthenticationError:
            # let callers distinguish these explicitly
            raise
        except Exception as exc:
            # Wrap unexpected errors in a generic AuthenticationError
            raise AuthenticationError(f"Token validation failed: {exc}") from exc

        self._check_expiry(jwt)
        self._check_audience(jwt)

        return JwtPayload.from_jwt(jwt)

    # ------------------------------------------------------------------ #
    # Internal: claim checks
    # ------------------------------------------------------------------ #

    def _check_expiry(self, jwt: Jwt) -> None:
        if not jwt.exp:
            return
        now = self.clock()
        if jwt.exp + self.leeway_seconds < now:
            logger.debug("jwt_expired", exp=jwt.exp, now=int(now))
            raise TokenExpiredError()

    def _check_audience(self, jwt: Jwt) -> None:
        if not self.audiences:
            return
        if any(aud in self.audiences for aud in jwt.aud):
            return
        logger.debug("jwt_audience_not_allowed", aud=list(jwt.aud))
        raise AudienceNotAllowedError(
            f"Invalid audience: expected one of {list(self.audiences)}, got {list(jwt.aud)}"
        )
