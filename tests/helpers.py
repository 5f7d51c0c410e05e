"""Token and key material builders shared by the tests."""

import base64
import json
from typing import Any

import jwt
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from pkg_jwt_auth.domain import base64url


def rsa_jwk(private_key: rsa.RSAPrivateKey, **extra: Any) -> dict:
    numbers = private_key.public_key().public_numbers()
    return {
        "kty": "RSA",
        "n": base64url.encode_uint(numbers.n),
        "e": base64url.encode_uint(numbers.e),
        **extra,
    }


def ec_jwk(private_key: ec.EllipticCurvePrivateKey, **extra: Any) -> dict:
    numbers = private_key.public_key().public_numbers()
    return {
        "kty": "EC",
        "crv": "P-256",
        "x": base64url.encode_uint(numbers.x),
        "y": base64url.encode_uint(numbers.y),
        **extra,
    }


def jwks(*keys: dict) -> str:
    return json.dumps({"keys": list(keys)})


def pem_body(
        private_key: rsa.RSAPrivateKey,
        fmt: serialization.PublicFormat = serialization.PublicFormat.SubjectPublicKeyInfo,
) -> str:
    """Base64 DER of the public key, i.e. a PEM without its armor lines."""
    der = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=fmt,
    )
    return base64.b64encode(der).decode()


def sign(private_key: Any, payload: dict, alg: str = "RS256", kid: str | None = None) -> str:
    headers = {"kid": kid} if kid is not None else None
    return jwt.encode(payload, private_key, algorithm=alg, headers=headers)


def make_token(header: Any, payload: Any, signature: bytes = b"signature") -> str:
    """Assemble a compact token from arbitrary (possibly invalid) parts."""

    def _segment(part: Any) -> str:
        if isinstance(part, str):
            return part
        return base64url.encode(json.dumps(part).encode())

    return ".".join([_segment(header), _segment(payload), base64url.encode(signature)])


def replace_signature(token: str, signature: bytes) -> str:
    header, payload, _ = token.split(".")
    return ".".join([header, payload, base64url.encode(signature)])


def flip_signature_bit(token: str) -> str:
    raw = bytearray(base64url.decode(token.split(".")[2]))
    raw[len(raw) // 2] ^= 0x01
    return replace_signature(token, bytes(raw))
