from __future__ import annotations

from typing import Optional

from ...application.use_cases.verify import Verifier
from ...domain.exceptions import InvalidTokenError, UnknownIssuerError
from ...domain.ports import TokenDecoder
from ...domain.token import Jwt
from ..crypto.pubkeys import Pubkeys
from ...log import get_logger

logger = get_logger(__name__)


class LocalJwtDecoder(TokenDecoder):
    """
    Adapter implementing TokenDecoder port against a local key set.

    Infrastructure layer:
    - Knows about JWT structure and signature verification.
    - Never fetches keys; the Pubkeys set is handed in by the host.
    """

    def __init__(
        self,
        pubkeys: Pubkeys,
        issuer: Optional[str] = None,
        verifier: Optional[Verifier] = None,
    ) -> None:
        self._pubkeys = pubkeys
        self._issuer = issuer or None
        self._verifier = verifier or Verifier()

    @property
    def pubkeys(self) -> Pubkeys:
        return self._pubkeys

    def with_pubkeys(self, pubkeys: Pubkeys) -> LocalJwtDecoder:
        """Return a decoder for rotated keys; this one is left untouched."""
        return LocalJwtDecoder(pubkeys, issuer=self._issuer, verifier=self._verifier)

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def decode(self, token: str) -> Jwt:
        """
        Parse and verify a JWT.

        Returns:
            The verified Jwt (claims are read from it).

        Raises:
            InvalidTokenError
            UnknownIssuerError
        """
        jwt = Jwt(token)
        result = self._verifier.verify(jwt, self._pubkeys)
        if not result:
            raise InvalidTokenError(f"Invalid token: {result.message}", status=result.status)

        if self._issuer is not None and jwt.iss != self._issuer:
            logger.debug("jwt_unknown_issuer", iss=jwt.iss, expected=self._issuer)
            raise UnknownIssuerError(
                f"Unknown issuer: expected {self._issuer}, got {jwt.iss!r}"
            )

        return jwt
