from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .ports import SignatureKey
from .token import Jwt


@dataclass(frozen=True, slots=True)
class Pubkey:
    """
    One usable public key of a key set.

    ``kid`` and ``alg`` are only constraints when their ``*_specified``
    flag is set; an entry specified with an empty ``kid`` is distinct
    from one without a ``kid`` at all.
    """
    kty: str
    key: SignatureKey
    kid: str = ""
    kid_specified: bool = False
    alg: str = ""
    alg_specified: bool = False
    pem_format: bool = False

    # ---- matching ---------------------------------------------------------

    def matches_kid(self, kid: str) -> bool:
        # A token without kid may be checked against every key.
        if not kid or not self.kid_specified:
            return True
        return self.kid == kid

    def matches_alg(self, alg: str) -> bool:
        return not self.alg_specified or self.alg == alg

    def is_candidate_for(self, token: Jwt) -> bool:
        return self.matches_kid(token.kid) and self.matches_alg(token.alg)


@dataclass(slots=True)
class JwtPayload:
    """
    Summary of an authenticated token, handed to the rest of the pipeline.

    ``user`` is ``iss/sub`` (or whichever of the two is present).
    """
    user: str = ""
    issuer: str = ""
    subject: str = ""
    audiences: Tuple[str, ...] = ()
    presenter: str = ""
    expires_at: int = 0
    claims: Dict[str, Any] = field(default_factory=dict)
    raw_claims: str = ""

    @classmethod
    def from_jwt(cls, token: Jwt) -> JwtPayload:
        iss, sub = token.iss, token.sub
        if iss and sub:
            user = f"{iss}/{sub}"
        else:
            user = iss or sub

        azp = token.claim("azp")

        return cls(
            user=user,
            issuer=iss,
            subject=sub,
            audiences=token.aud,
            presenter=azp if isinstance(azp, str) else "",
            expires_at=token.exp,
            claims=token.payload,
            raw_claims=token.payload_str,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user": self.user,
            "iss": self.issuer,
            "sub": self.subject,
            "aud": list(self.audiences),
            "azp": self.presenter,
            "exp": self.expires_at,
        }
