"""Shared test fixtures for pkg_jwt_auth."""

from typing import Callable

import pytest
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from helpers import sign


@pytest.fixture(scope="session")
def rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def other_rsa_private_key() -> rsa.RSAPrivateKey:
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def ec_private_key() -> ec.EllipticCurvePrivateKey:
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def token_factory(rsa_private_key) -> Callable[..., str]:
    """Sign tokens with the session RSA key (kid "k1" unless told otherwise)."""

    def _factory(payload: dict | None = None, alg: str = "RS256", kid: str | None = "k1") -> str:
        claims = {"iss": "https://issuer.example.com", "sub": "user-1"} if payload is None else payload
        return sign(rsa_private_key, claims, alg=alg, kid=kid)

    return _factory
