from __future__ import annotations

import json
import math
from typing import Any, Dict, Optional, Tuple

from . import base64url
from .constants import EXP_MAX, SUPPORTED_ALGORITHMS, Status


# JSON has no NaN or Infinity.
def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant {name!r}")


def loads_json(text: str) -> Any:
    return json.loads(text, parse_constant=_reject_constant)


class _TokenParseError(Exception):
    def __init__(self, status: Status) -> None:
        self.status = status
        super().__init__(status.value)


def _decode_json_object(segment: str, status: Status) -> Tuple[str, Dict[str, Any]]:
    raw = base64url.decode(segment)
    try:
        text = raw.decode("utf-8")
        value = loads_json(text)
    except (ValueError, RecursionError) as exc:
        raise _TokenParseError(status) from exc
    if not isinstance(value, dict):
        raise _TokenParseError(status)
    return text, value


def _string_claim(payload: Dict[str, Any], name: str) -> str:
    value = payload.get(name)
    return value if isinstance(value, str) else ""


def _exp_claim(payload: Dict[str, Any]) -> int:
    value = payload.get("exp")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    if value < 0:
        return 0
    return min(int(value), EXP_MAX)


def _aud_claim(payload: Dict[str, Any]) -> Tuple[str, ...]:
    # "aud" may be a string array or a single string.
    if "aud" not in payload:
        return ()
    value = payload["aud"]
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise _TokenParseError(Status.JWT_PAYLOAD_PARSE_ERROR)


class Jwt:
    """
    A compact JWT parsed and structurally validated at construction time.

    Construction never raises on bad input: ``status`` records the first
    failure, and while it is not OK every accessor returns its default.
    The raw base64url header and payload segments are kept verbatim since
    they, not a re-serialization of the parsed JSON, are the signing input.
    """

    __slots__ = (
        "_status",
        "_header_b64",
        "_payload_b64",
        "_header_str",
        "_payload_str",
        "_header",
        "_payload",
        "_alg",
        "_kid",
        "_iss",
        "_sub",
        "_exp",
        "_aud",
        "_signature",
    )

    def __init__(self, token: str) -> None:
        self._status = Status.OK
        self._header_b64 = ""
        self._payload_b64 = ""
        self._header_str = ""
        self._payload_str = ""
        self._header: Dict[str, Any] = {}
        self._payload: Dict[str, Any] = {}
        self._alg = ""
        self._kid = ""
        self._iss = ""
        self._sub = ""
        self._exp = 0
        self._aud: Tuple[str, ...] = ()
        self._signature = b""

        try:
            self._parse(token)
        except _TokenParseError as exc:
            self._reset(exc.status)

    def _parse(self, token: str) -> None:
        # exactly 2 dots, and no empty segment
        if token.count(".") != 2:
            raise _TokenParseError(Status.JWT_BAD_FORMAT)
        header_b64, payload_b64, signature_b64 = token.split(".")
        if not header_b64 or not payload_b64 or not signature_b64:
            raise _TokenParseError(Status.JWT_BAD_FORMAT)

        # ---- Header -------------------------------------------------------
        header_str, header = _decode_json_object(header_b64, Status.JWT_HEADER_PARSE_ERROR)

        if "alg" not in header:
            raise _TokenParseError(Status.JWT_HEADER_NO_ALG)
        alg = header["alg"]
        if not isinstance(alg, str):
            raise _TokenParseError(Status.JWT_HEADER_BAD_ALG)
        if alg not in SUPPORTED_ALGORITHMS:
            raise _TokenParseError(Status.ALG_NOT_IMPLEMENTED)

        kid = header.get("kid", "")
        if not isinstance(kid, str):
            raise _TokenParseError(Status.JWT_HEADER_BAD_KID)

        # ---- Payload ------------------------------------------------------
        payload_str, payload = _decode_json_object(payload_b64, Status.JWT_PAYLOAD_PARSE_ERROR)
        aud = _aud_claim(payload)

        # ---- Signature ----------------------------------------------------
        signature = base64url.decode(signature_b64)
        if not signature:
            raise _TokenParseError(Status.JWT_SIGNATURE_PARSE_ERROR)

        self._header_b64 = header_b64
        self._payload_b64 = payload_b64
        self._header_str = header_str
        self._payload_str = payload_str
        self._header = header
        self._payload = payload
        self._alg = alg
        self._kid = kid
        self._iss = _string_claim(payload, "iss")
        self._sub = _string_claim(payload, "sub")
        self._exp = _exp_claim(payload)
        self._aud = aud
        self._signature = signature

    def _reset(self, status: Status) -> None:
        self._status = status
        self._header_b64 = ""
        self._payload_b64 = ""
        self._header_str = ""
        self._payload_str = ""
        self._header = {}
        self._payload = {}
        self._alg = ""
        self._kid = ""
        self._iss = ""
        self._sub = ""
        self._exp = 0
        self._aud = ()
        self._signature = b""

    # ------------------------------------------------------------------ #
    # Read-only accessors
    # ------------------------------------------------------------------ #

    @property
    def status(self) -> Status:
        return self._status

    @property
    def ok(self) -> bool:
        return self._status is Status.OK

    @property
    def header_str_base64url(self) -> str:
        return self._header_b64

    @property
    def payload_str_base64url(self) -> str:
        return self._payload_b64

    @property
    def header_str(self) -> str:
        return self._header_str

    @property
    def payload_str(self) -> str:
        return self._payload_str

    @property
    def header(self) -> Dict[str, Any]:
        return dict(self._header)

    @property
    def payload(self) -> Dict[str, Any]:
        return dict(self._payload)

    @property
    def alg(self) -> str:
        return self._alg

    @property
    def kid(self) -> str:
        return self._kid

    @property
    def iss(self) -> str:
        return self._iss

    @property
    def sub(self) -> str:
        return self._sub

    @property
    def exp(self) -> int:
        return self._exp

    @property
    def aud(self) -> Tuple[str, ...]:
        return self._aud

    @property
    def signature(self) -> bytes:
        return self._signature

    @property
    def signing_input(self) -> bytes:
        """The exact bytes the signature covers, or b"" for an invalid token."""
        if not self.ok:
            return b""
        return f"{self._header_b64}.{self._payload_b64}".encode("ascii")

    def claim(self, name: str, default: Optional[Any] = None) -> Any:
        return self._payload.get(name, default)

    def __repr__(self) -> str:
        return f"Jwt(status={self._status.value}, alg={self._alg!r}, kid={self._kid!r})"
