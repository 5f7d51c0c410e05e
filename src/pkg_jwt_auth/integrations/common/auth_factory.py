from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...adapters.crypto.pubkeys import Pubkeys
from ...adapters.local.jwt_decoder import LocalJwtDecoder
from ...application.use_cases.authenticate import AuthenticateTokenUseCase
from ...config.env import settings_from_env
from ...config.settings import JwtAuthSettings
from ...domain.entities import JwtPayload
from ...domain.exceptions import ConfigurationError


@dataclass(slots=True)
class JwtAuthDependencies:
    """
    Framework-agnostic auth facade.

    Host code (a proxy filter, a web framework hook, a CLI) adapts this to
    its own request handling.
    """

    auth_use_case: AuthenticateTokenUseCase
    pubkeys: Pubkeys

    def authenticate(self, token: Optional[str]) -> JwtPayload:
        """Token -> JwtPayload (or raise auth exceptions)."""
        return self.auth_use_case.execute(token)


def create_authenticator(settings: JwtAuthSettings) -> JwtAuthDependencies:
    """
    High-level factory: settings -> JwtAuthDependencies.

    - builds the Pubkeys set (failing fast on unusable key material)
    - wires LocalJwtDecoder + AuthenticateTokenUseCase
    """
    pubkeys = Pubkeys.create_from(settings.pubkey, settings.pubkey_type)
    if not pubkeys.ok:
        raise ConfigurationError(
            f"Unusable {settings.pubkey_type.value} public key material: {pubkeys.status.message}"
        )

    decoder = LocalJwtDecoder(pubkeys, issuer=settings.issuer)
    auth_uc = AuthenticateTokenUseCase(
        token_decoder=decoder,
        audiences=settings.audience_tuple,
        leeway_seconds=settings.leeway_seconds,
    )
    return JwtAuthDependencies(auth_use_case=auth_uc, pubkeys=pubkeys)


def create_authenticator_from_env() -> JwtAuthDependencies:
    """Convenience wrapper using env-configured settings."""
    return create_authenticator(settings_from_env())
