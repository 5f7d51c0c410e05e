"""
pkg_jwt_auth

Local JWT verification core: parses compact tokens, builds public key sets
from PEM or JWKS material, and checks RS256/RS384/RS512/ES256 signatures.
Framework glue (header extraction, policy binding) belongs to the host.
"""

__version__ = "0.1.0"

from .domain.constants import Status, KeyType, STATUS_MESSAGES, SUPPORTED_ALGORITHMS
from .domain.entities import Pubkey, JwtPayload
from .domain.exceptions import (
    AuthenticationError,
    InvalidTokenError,
    TokenExpiredError,
    TokenMissingError,
    UnknownIssuerError,
    AudienceNotAllowedError,
    InvalidPublicKeyError,
    ConfigurationError,
)
from .domain.value_objects import VerificationResult, RejectedKey
from .domain.ports import SignatureKey, TokenDecoder
from .domain.token import Jwt
from .domain import base64url

from .adapters.crypto.keys import RsaKey, EcKey, pubkey_from_jwk
from .adapters.crypto.pubkeys import Pubkeys
from .adapters.local.jwt_decoder import LocalJwtDecoder

from .application.use_cases.verify import Verifier, verify
from .application.use_cases.authenticate import AuthenticateTokenUseCase

from .config import JwtAuthSettings, settings_from_env
from .integrations.common.auth_factory import (
    JwtAuthDependencies,
    create_authenticator,
    create_authenticator_from_env,
)

__all__ = [
    "__version__",
    # domain core
    "Status",
    "KeyType",
    "STATUS_MESSAGES",
    "SUPPORTED_ALGORITHMS",
    "Jwt",
    "Pubkey",
    "JwtPayload",
    "VerificationResult",
    "RejectedKey",
    "SignatureKey",
    "TokenDecoder",
    "base64url",
    # exceptions
    "AuthenticationError",
    "InvalidTokenError",
    "TokenExpiredError",
    "TokenMissingError",
    "UnknownIssuerError",
    "AudienceNotAllowedError",
    "InvalidPublicKeyError",
    "ConfigurationError",
    # adapters
    "RsaKey",
    "EcKey",
    "pubkey_from_jwk",
    "Pubkeys",
    "LocalJwtDecoder",
    # use cases
    "Verifier",
    "verify",
    "AuthenticateTokenUseCase",
    # wiring
    "JwtAuthSettings",
    "settings_from_env",
    "JwtAuthDependencies",
    "create_authenticator",
    "create_authenticator_from_env",
]
