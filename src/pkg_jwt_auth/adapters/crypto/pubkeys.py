from __future__ import annotations

import base64
import binascii
from typing import Any, Iterator, List, Sequence, Tuple

from ...domain.constants import KeyType, Status
from ...domain.entities import Pubkey
from ...domain.exceptions import InvalidPublicKeyError
from ...domain.token import loads_json
from ...domain.value_objects import RejectedKey
from ...log import get_logger
from .keys import pubkey_from_der, pubkey_from_jwk

logger = get_logger(__name__)


class Pubkeys:
    """
    An immutable, ordered set of public keys built from PEM or JWKS text.

    Building never raises on bad material: ``status`` records why no key
    set could be produced. JWKS entries that cannot be used are skipped and
    listed in ``rejected``. Instances hold no per-request state and can be
    shared between threads; rotating keys means building a new instance.
    """

    __slots__ = ("_keys", "_status", "_rejected")

    def __init__(
            self,
            keys: Sequence[Pubkey] = (),
            status: Status = Status.OK,
            rejected: Sequence[RejectedKey] = (),
    ) -> None:
        self._keys: Tuple[Pubkey, ...] = tuple(keys)
        self._status = status
        self._rejected: Tuple[RejectedKey, ...] = tuple(rejected)

    # ------------------------------------------------------------------ #
    # Builders
    # ------------------------------------------------------------------ #

    @classmethod
    def create_from(cls, pkey: str, key_type: KeyType) -> Pubkeys:
        if key_type is KeyType.JWKS:
            return cls.from_jwks(pkey)
        if key_type is KeyType.PEM:
            return cls.from_pem(pkey)
        raise ValueError(f"Unsupported key type: {key_type!r}")

    @classmethod
    def from_pem(cls, pkey_pem: str) -> Pubkeys:
        """
        Build a single-key set from the base64 body of a PEM RSA public key.

        Armor lines are not handled here; whitespace between base64 lines is.
        """
        try:
            der = base64.b64decode("".join(pkey_pem.split()), validate=True)
        except (binascii.Error, ValueError):
            der = b""
        if not der:
            logger.debug("pubkeys_pem_bad_base64")
            return cls(status=Status.PEM_PUBKEY_BAD_BASE64)

        try:
            pubkey = pubkey_from_der(der)
        except InvalidPublicKeyError as exc:
            logger.debug("pubkeys_pem_parse_error", reason=str(exc))
            return cls(status=exc.status)

        return cls(keys=[pubkey])

    @classmethod
    def from_jwks(cls, pkey_jwks: str) -> Pubkeys:
        """
        Build a key set from a JWKS document (RFC 7517 section 5).

        Entries with a missing or unsupported ``kty``, or with unusable key
        members, are skipped. The set only fails as a whole when the
        document is malformed or no entry produced a key.
        """
        try:
            document = loads_json(pkey_jwks)
        except (ValueError, RecursionError):
            logger.debug("pubkeys_jwks_parse_error")
            return cls(status=Status.JWK_PARSE_ERROR)
        if not isinstance(document, dict):
            logger.debug("pubkeys_jwks_parse_error")
            return cls(status=Status.JWK_PARSE_ERROR)

        if "keys" not in document:
            return cls(status=Status.JWK_NO_KEYS)

        entries = document["keys"]
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            return cls(status=Status.JWK_BAD_KEYS)

        keys: List[Pubkey] = []
        rejected: List[RejectedKey] = []
        for index, entry in enumerate(entries):
            try:
                keys.append(pubkey_from_jwk(entry))
            except InvalidPublicKeyError as exc:
                logger.debug(
                    "pubkeys_jwk_skipped",
                    index=index,
                    kty=entry.get("kty"),
                    status=exc.status.value,
                    reason=str(exc),
                )
                rejected.append(RejectedKey(index=index, status=exc.status, reason=str(exc)))

        if not keys:
            logger.debug("pubkeys_no_valid_pubkey", rejected=len(rejected))
            return cls(status=Status.JWK_NO_VALID_PUBKEY, rejected=rejected)

        logger.debug("pubkeys_built", keys=len(keys), rejected=len(rejected))
        return cls(keys=keys, rejected=rejected)

    # ------------------------------------------------------------------ #
    # Read-only accessors
    # ------------------------------------------------------------------ #

    @property
    def keys(self) -> Tuple[Pubkey, ...]:
        return self._keys

    @property
    def status(self) -> Status:
        return self._status

    @property
    def ok(self) -> bool:
        return self._status is Status.OK

    @property
    def rejected(self) -> Tuple[RejectedKey, ...]:
        return self._rejected

    def __iter__(self) -> Iterator[Pubkey]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"Pubkeys(status={self._status.value}, keys={len(self._keys)})"


def describe(pubkeys: Pubkeys) -> List[dict[str, Any]]:
    """Key metadata safe to print or log (no key material)."""
    return [
        {
            "kty": key.kty,
            "kid": key.kid if key.kid_specified else None,
            "alg": key.alg if key.alg_specified else None,
            "pem": key.pem_format,
        }
        for key in pubkeys
    ]
