# tests/test_verify.py
from concurrent.futures import ThreadPoolExecutor

import pytest
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec

from pkg_jwt_auth.adapters.crypto.pubkeys import Pubkeys
from pkg_jwt_auth.application.use_cases.verify import Verifier, verify
from pkg_jwt_auth.domain import base64url
from pkg_jwt_auth.domain.constants import Status
from pkg_jwt_auth.domain.token import Jwt

from helpers import (
    ec_jwk,
    flip_signature_bit,
    jwks,
    make_token,
    pem_body,
    replace_signature,
    rsa_jwk,
    sign,
)

CLAIMS = {"iss": "https://issuer.example.com", "sub": "user-1", "aud": "api"}


def test_rs256_with_matching_kid(rsa_private_key):
    token = sign(rsa_private_key, CLAIMS, alg="RS256", kid="k1")
    keys = Pubkeys.from_jwks(jwks(rsa_jwk(rsa_private_key, kid="k1")))

    result = Verifier().verify(Jwt(token), keys)

    assert result.ok
    assert result.status is Status.OK
    assert result


@pytest.mark.parametrize("alg", ["RS256", "RS384", "RS512"])
def test_rsa_digests_with_pem_key(rsa_private_key, alg):
    token = sign(rsa_private_key, CLAIMS, alg=alg)
    assert verify(Jwt(token), Pubkeys.from_pem(pem_body(rsa_private_key))).ok


@pytest.mark.parametrize("alg", ["RS384", "RS512"])
def test_rsa_digest_follows_token_alg(rsa_private_key, alg):
    # A signature made with SHA-256 does not verify once the header claims another digest.
    rs256 = sign(rsa_private_key, CLAIMS, alg="RS256")
    header = base64url.encode(('{"alg":"%s"}' % alg).encode())
    _, payload, signature = rs256.split(".")
    forged = ".".join([header, payload, signature])

    result = verify(Jwt(forged), Pubkeys.from_pem(pem_body(rsa_private_key)))
    assert result.status is Status.JWT_INVALID_SIGNATURE


def test_es256_with_jwks(ec_private_key):
    token = sign(ec_private_key, CLAIMS, alg="ES256", kid="ec-1")
    keys = Pubkeys.from_jwks(jwks(ec_jwk(ec_private_key, kid="ec-1", alg="ES256")))

    assert verify(Jwt(token), keys).ok


def test_kid_mismatch(rsa_private_key):
    token = sign(rsa_private_key, CLAIMS, kid="k1")
    keys = Pubkeys.from_jwks(jwks(rsa_jwk(rsa_private_key, kid="k2")))

    result = verify(Jwt(token), keys)

    assert not result
    assert result.status is Status.KID_ALG_UNMATCH


def test_alg_mismatch(rsa_private_key):
    token = sign(rsa_private_key, CLAIMS, alg="RS256")
    keys = Pubkeys.from_jwks(jwks(rsa_jwk(rsa_private_key, alg="RS512")))

    assert verify(Jwt(token), keys).status is Status.KID_ALG_UNMATCH


def test_token_without_kid_tries_every_key(rsa_private_key, other_rsa_private_key):
    token = sign(rsa_private_key, CLAIMS)
    keys = Pubkeys.from_jwks(
        jwks(
            rsa_jwk(other_rsa_private_key, kid="a"),
            rsa_jwk(rsa_private_key, kid="b"),
        )
    )

    assert verify(Jwt(token), keys).ok


def test_key_without_kid_matches_any_token_kid(rsa_private_key):
    token = sign(rsa_private_key, CLAIMS, kid="whatever")
    assert verify(Jwt(token), Pubkeys.from_jwks(jwks(rsa_jwk(rsa_private_key)))).ok


def test_failed_candidate_moves_on_to_next_key(rsa_private_key, other_rsa_private_key):
    token = sign(rsa_private_key, CLAIMS, kid="k1")
    keys = Pubkeys.from_jwks(
        jwks(
            rsa_jwk(other_rsa_private_key),
            rsa_jwk(rsa_private_key, kid="k1"),
        )
    )

    assert verify(Jwt(token), keys).ok


def test_flipped_signature_bit(rsa_private_key):
    token = flip_signature_bit(sign(rsa_private_key, CLAIMS, kid="k1"))
    keys = Pubkeys.from_jwks(jwks(rsa_jwk(rsa_private_key, kid="k1")))

    assert verify(Jwt(token), keys).status is Status.JWT_INVALID_SIGNATURE


def test_flipped_signature_bit_es256(ec_private_key):
    token = flip_signature_bit(sign(ec_private_key, CLAIMS, alg="ES256"))
    keys = Pubkeys.from_jwks(jwks(ec_jwk(ec_private_key)))

    assert verify(Jwt(token), keys).status is Status.JWT_INVALID_SIGNATURE


def test_tampered_payload(rsa_private_key):
    header, _, signature = sign(rsa_private_key, CLAIMS).split(".")
    payload = base64url.encode(b'{"iss":"https://issuer.example.com","sub":"admin"}')
    token = ".".join([header, payload, signature])

    result = verify(Jwt(token), Pubkeys.from_pem(pem_body(rsa_private_key)))
    assert result.status is Status.JWT_INVALID_SIGNATURE


def test_wrong_rsa_key(rsa_private_key, other_rsa_private_key):
    token = sign(rsa_private_key, CLAIMS)
    keys = Pubkeys.from_pem(pem_body(other_rsa_private_key))

    assert verify(Jwt(token), keys).status is Status.JWT_INVALID_SIGNATURE


@pytest.mark.parametrize("size", [1, 32, 63, 65, 70, 72, 128])
def test_es256_signature_must_be_64_bytes(ec_private_key, size):
    valid = sign(ec_private_key, CLAIMS, alg="ES256")
    raw = base64url.decode(valid.split(".")[2])
    assert len(raw) == 64

    token = replace_signature(valid, (raw * 3)[:size])
    keys = Pubkeys.from_jwks(jwks(ec_jwk(ec_private_key)))

    assert verify(Jwt(token), keys).status is Status.JWT_INVALID_SIGNATURE


def test_es256_der_signature_never_verifies(ec_private_key):
    valid = sign(ec_private_key, CLAIMS, alg="ES256")
    header, payload, _ = valid.split(".")
    der = ec_private_key.sign(f"{header}.{payload}".encode(), ec.ECDSA(hashes.SHA256()))
    token = replace_signature(valid, der)

    keys = Pubkeys.from_jwks(jwks(ec_jwk(ec_private_key)))
    assert verify(Jwt(token), keys).status is Status.JWT_INVALID_SIGNATURE


def test_mixed_key_types(rsa_private_key, ec_private_key):
    keys = Pubkeys.from_jwks(jwks(ec_jwk(ec_private_key), rsa_jwk(rsa_private_key)))

    assert verify(Jwt(sign(rsa_private_key, CLAIMS, alg="RS256")), keys).ok
    assert verify(Jwt(sign(ec_private_key, CLAIMS, alg="ES256")), keys).ok


def test_rsa_token_against_unconstrained_ec_key(rsa_private_key, ec_private_key):
    token = sign(rsa_private_key, CLAIMS, alg="RS256")
    keys = Pubkeys.from_jwks(jwks(ec_jwk(ec_private_key)))

    assert verify(Jwt(token), keys).status is Status.JWT_INVALID_SIGNATURE


def test_token_status_propagates(rsa_private_key):
    keys = Pubkeys.from_pem(pem_body(rsa_private_key))
    assert verify(Jwt("not-a-token"), keys).status is Status.JWT_BAD_FORMAT
    assert verify(Jwt(make_token({"alg": "HS256"}, CLAIMS)), keys).status is Status.ALG_NOT_IMPLEMENTED


def test_pubkeys_status_propagates(rsa_private_key):
    token = Jwt(sign(rsa_private_key, CLAIMS))
    assert verify(token, Pubkeys.from_jwks("{}")).status is Status.JWK_NO_KEYS
    assert verify(token, Pubkeys.from_pem("")).status is Status.PEM_PUBKEY_BAD_BASE64


def test_token_status_is_reported_before_pubkeys_status():
    result = verify(Jwt("a.b"), Pubkeys.from_jwks("not json"))
    assert result.status is Status.JWT_BAD_FORMAT


def test_verify_does_not_mutate_inputs(rsa_private_key):
    token = Jwt(flip_signature_bit(sign(rsa_private_key, CLAIMS)))
    keys = Pubkeys.from_pem(pem_body(rsa_private_key))

    verify(token, keys)

    assert token.ok
    assert keys.ok
    assert len(keys) == 1


def test_shared_verifier_and_pubkeys_across_threads(rsa_private_key, other_rsa_private_key):
    verifier = Verifier()
    keys = Pubkeys.from_jwks(jwks(rsa_jwk(rsa_private_key, kid="k1")))
    good = sign(rsa_private_key, CLAIMS, kid="k1")
    bad_sig = sign(other_rsa_private_key, CLAIMS, kid="k1")
    bad_kid = sign(rsa_private_key, CLAIMS, kid="k9")

    tokens = [good, bad_sig, bad_kid] * 20
    expected = [Status.OK, Status.JWT_INVALID_SIGNATURE, Status.KID_ALG_UNMATCH] * 20

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda t: verifier.verify(Jwt(t), keys).status, tokens))

    assert results == expected
