from __future__ import annotations

from dataclasses import dataclass

from ...adapters.crypto.pubkeys import Pubkeys
from ...domain.constants import Status
from ...domain.token import Jwt
from ...domain.value_objects import VerificationResult
from ...log import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Verifier:
    """
    Application use case:
    - pick the candidate keys of a key set for a parsed token
    - check the token signature against them, first match wins

    Holds no state: every call returns its own VerificationResult, so one
    instance may be shared by concurrent callers.
    """

    def verify(self, token: Jwt, pubkeys: Pubkeys) -> VerificationResult:
        if not token.ok:
            return VerificationResult(token.status)
        if not pubkeys.ok:
            return VerificationResult(pubkeys.status)

        signing_input = token.signing_input
        signature = token.signature
        candidate_found = False

        for pubkey in pubkeys.keys:
            if not pubkey.is_candidate_for(token):
                continue
            candidate_found = True

            if pubkey.key.verify(token.alg, signing_input, signature):
                return VerificationResult.success()

        status = Status.JWT_INVALID_SIGNATURE if candidate_found else Status.KID_ALG_UNMATCH
        logger.debug(
            "jwt_verification_failed",
            status=status.value,
            alg=token.alg,
            kid=token.kid,
            keys=len(pubkeys),
        )
        return VerificationResult(status)


def verify(token: Jwt, pubkeys: Pubkeys) -> VerificationResult:
    """Module-level shortcut for ``Verifier().verify``."""
    return Verifier().verify(token, pubkeys)
