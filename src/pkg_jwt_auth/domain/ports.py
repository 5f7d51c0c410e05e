from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .token import Jwt


class SignatureKey(Protocol):
    """
    Port for a public key that can check a JWS signature.

    Implementations live in the adapters layer (RSA and EC keys).
    """

    kty: str

    def verify(self, alg: str, signing_input: bytes, signature: bytes) -> bool:
        """
        Return True when ``signature`` is valid for ``signing_input``.

        ``alg`` is the token header algorithm; a key decides for itself
        which digest it implies. Never raises on a bad signature.
        """
        ...


class TokenDecoder(Protocol):
    """
    Port for turning a raw bearer token into a verified Jwt.
    """

    def decode(self, token: str) -> Jwt:
        """
        Parse and verify the given token.

        Should:
          - validate the token structure
          - verify the signature
        Raises:
          - InvalidTokenError
          - UnknownIssuerError
          - or other domain-specific auth exceptions
        """
        ...
