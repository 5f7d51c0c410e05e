from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..domain.constants import KeyType


@dataclass(slots=True)
class JwtAuthSettings:
    """
    Key material + claim checks for local JWT verification.

    Host code decides how to construct this (env, config file, etc.).
    """
    pubkey: str
    pubkey_type: KeyType = KeyType.JWKS

    # Claim checks
    issuer: Optional[str] = None
    audiences: List[str] = field(default_factory=list)
    leeway_seconds: int = 0

    @property
    def audience_tuple(self) -> tuple[str, ...]:
        return tuple(a.strip() for a in self.audiences if a and a.strip())
