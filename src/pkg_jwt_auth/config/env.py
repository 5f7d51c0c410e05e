from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from ..domain.constants import KeyType
from ..domain.exceptions import ConfigurationError
from .settings import JwtAuthSettings

ENV_PREFIX = "JWT_AUTH_"


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> JwtAuthSettings:
    env = os.environ if environ is None else environ

    def _get(key: str) -> Optional[str]:
        raw = env.get(ENV_PREFIX + key)
        if raw is None or not raw.strip():
            return None
        return raw

    def _split_csv(key: str) -> list[str]:
        raw = _get(key)
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x and x.strip()]

    def _int(key: str, default: int = 0) -> int:
        raw = _get(key)
        if raw is None:
            return default
        try:
            return int(raw.strip())
        except ValueError as exc:
            raise ConfigurationError(f"{ENV_PREFIX}{key} must be an integer, got {raw!r}") from exc

    pubkey = _get("PUBKEY")
    pubkey_file = _get("PUBKEY_FILE")
    if pubkey is None and pubkey_file is not None:
        try:
            pubkey = Path(pubkey_file.strip()).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigurationError(f"Cannot read {ENV_PREFIX}PUBKEY_FILE: {exc}") from exc
    if pubkey is None:
        raise ConfigurationError(
            f"Missing JWT auth settings: {ENV_PREFIX}PUBKEY or {ENV_PREFIX}PUBKEY_FILE"
        )

    raw_type = (_get("PUBKEY_TYPE") or KeyType.JWKS.value).strip().lower()
    try:
        pubkey_type = KeyType(raw_type)
    except ValueError as exc:
        raise ConfigurationError(
            f"{ENV_PREFIX}PUBKEY_TYPE must be 'jwks' or 'pem', got {raw_type!r}"
        ) from exc

    issuer = _get("ISSUER")

    return JwtAuthSettings(
        pubkey=pubkey,
        pubkey_type=pubkey_type,
        issuer=issuer.strip() if issuer else None,
        audiences=_split_csv("AUDIENCES"),
        leeway_seconds=_int("LEEWAY_SECONDS", 0),
    )
