from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from jwt.algorithms import ECAlgorithm, RSAAlgorithm

from ...domain import base64url
from ...domain.constants import (
    EC_ALGORITHMS,
    ES256_SIGNATURE_SIZE,
    KTY_EC,
    KTY_RSA,
    RSA_ALGORITHMS,
    Status,
)
from ...domain.entities import Pubkey
from ...domain.exceptions import InvalidPublicKeyError

_RSA_VERIFIERS = {
    "RS256": RSAAlgorithm(RSAAlgorithm.SHA256),
    "RS384": RSAAlgorithm(RSAAlgorithm.SHA384),
    "RS512": RSAAlgorithm(RSAAlgorithm.SHA512),
}
_ES256_VERIFIER = ECAlgorithm(ECAlgorithm.SHA256)


@dataclass(frozen=True, slots=True)
class RsaKey:
    """RSA public key checking PKCS#1 v1.5 signatures."""

    public_key: rsa.RSAPublicKey
    kty: str = KTY_RSA

    def verify(self, alg: str, signing_input: bytes, signature: bytes) -> bool:
        # RS384 / RS512 pick their digest, anything else is SHA-256.
        algorithm = _RSA_VERIFIERS.get(alg, _RSA_VERIFIERS["RS256"])
        try:
            return algorithm.verify(signing_input, self.public_key, signature)
        except ValueError:
            return False


@dataclass(frozen=True, slots=True)
class EcKey:
    """P-256 public key checking raw ``r || s`` ECDSA signatures."""

    public_key: ec.EllipticCurvePublicKey
    kty: str = KTY_EC

    def verify(self, alg: str, signing_input: bytes, signature: bytes) -> bool:
        if len(signature) != ES256_SIGNATURE_SIZE:
            return False
        return _ES256_VERIFIER.verify(signing_input, self.public_key, signature)


# --------------------------------------------------------------------------- #
# Constructors
# --------------------------------------------------------------------------- #


def rsa_key_from_der(der: bytes) -> RsaKey:
    """
    Load a DER RSA public key (PKCS#1 ``RSAPublicKey`` or SubjectPublicKeyInfo).

    Raises:
        InvalidPublicKeyError(PEM_PUBKEY_PARSE_ERROR)
    """
    try:
        loaded = serialization.load_der_public_key(der)
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise InvalidPublicKeyError(Status.PEM_PUBKEY_PARSE_ERROR, str(exc)) from exc
    if not isinstance(loaded, rsa.RSAPublicKey):
        raise InvalidPublicKeyError(
            Status.PEM_PUBKEY_PARSE_ERROR, "DER public key is not an RSA key"
        )
    return RsaKey(loaded)


def rsa_key_from_components(n: str, e: str) -> RsaKey:
    modulus = base64url.decode_uint(n)
    exponent = base64url.decode_uint(e)
    if modulus is None or exponent is None:
        raise InvalidPublicKeyError(
            Status.JWK_RSA_PUBKEY_PARSE_ERROR, "RSA modulus or exponent is not base64url"
        )
    try:
        public_key = rsa.RSAPublicNumbers(exponent, modulus).public_key()
    except ValueError as exc:
        raise InvalidPublicKeyError(Status.JWK_RSA_PUBKEY_PARSE_ERROR, str(exc)) from exc
    return RsaKey(public_key)


def ec_key_from_coordinates(x: str, y: str) -> EcKey:
    x_value = base64url.decode_uint(x)
    y_value = base64url.decode_uint(y)
    if x_value is None or y_value is None:
        raise InvalidPublicKeyError(
            Status.JWK_EC_PUBKEY_PARSE_ERROR, "EC coordinate is not base64url"
        )
    try:
        public_key = ec.EllipticCurvePublicNumbers(x_value, y_value, ec.SECP256R1()).public_key()
    except ValueError as exc:
        raise InvalidPublicKeyError(Status.JWK_EC_PUBKEY_PARSE_ERROR, str(exc)) from exc
    return EcKey(public_key)


# --------------------------------------------------------------------------- #
# JWK -> Pubkey factory
# --------------------------------------------------------------------------- #


def _string_member(jwk: Mapping[str, Any], name: str, status: Status) -> str:
    value = jwk.get(name)
    if not isinstance(value, str):
        raise InvalidPublicKeyError(status, f"JWK member {name!r} is missing or not a string")
    return value


def _optional_constraints(
        jwk: Mapping[str, Any],
        allowed_algs: frozenset[str],
        status: Status,
) -> Dict[str, Any]:
    """Validate optional ``kid`` / ``alg`` and return them as Pubkey fields."""
    fields: Dict[str, Any] = {}

    if "kid" in jwk:
        fields["kid"] = _string_member(jwk, "kid", status)
        fields["kid_specified"] = True

    if "alg" in jwk:
        alg = jwk["alg"]
        if not isinstance(alg, str) or alg not in allowed_algs:
            raise InvalidPublicKeyError(status, f"JWK alg {alg!r} does not fit the key type")
        fields["alg"] = alg
        fields["alg_specified"] = True

    return fields


def _rsa_pubkey(jwk: Mapping[str, Any]) -> Pubkey:
    status = Status.JWK_RSA_PUBKEY_PARSE_ERROR
    constraints = _optional_constraints(jwk, RSA_ALGORITHMS, status)
    key = rsa_key_from_components(
        _string_member(jwk, "n", status),
        _string_member(jwk, "e", status),
    )
    return Pubkey(kty=KTY_RSA, key=key, **constraints)


def _ec_pubkey(jwk: Mapping[str, Any]) -> Pubkey:
    status = Status.JWK_EC_PUBKEY_PARSE_ERROR
    constraints = _optional_constraints(jwk, EC_ALGORITHMS, status)
    key = ec_key_from_coordinates(
        _string_member(jwk, "x", status),
        _string_member(jwk, "y", status),
    )
    return Pubkey(kty=KTY_EC, key=key, **constraints)


_JWK_FACTORIES: Dict[str, Callable[[Mapping[str, Any]], Pubkey]] = {
    KTY_RSA: _rsa_pubkey,
    KTY_EC: _ec_pubkey,
}


def pubkey_from_jwk(jwk: Mapping[str, Any]) -> Pubkey:
    """
    Build a Pubkey from one JWKS entry, dispatching on ``kty``.

    Raises:
        InvalidPublicKeyError: with JWK_BAD_KEYS when ``kty`` is missing or
        unsupported, otherwise with the RSA / EC parse error status.
    """
    kty = jwk.get("kty")
    if not isinstance(kty, str):
        raise InvalidPublicKeyError(Status.JWK_BAD_KEYS, "JWK has no string 'kty'")

    factory = _JWK_FACTORIES.get(kty)
    if factory is None:
        raise InvalidPublicKeyError(Status.JWK_BAD_KEYS, f"Unsupported JWK kty {kty!r}")
    return factory(jwk)


def pubkey_from_der(der: bytes) -> Pubkey:
    return Pubkey(kty=KTY_RSA, key=rsa_key_from_der(der), pem_format=True)
