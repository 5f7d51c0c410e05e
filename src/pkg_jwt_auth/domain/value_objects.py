# src/pkg_jwt_auth/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass

from .constants import Status


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """
    Outcome of one verification call.

    Returned instead of being stored on the verifier, so a single verifier
    can serve concurrent callers.
    """
    status: Status

    @property
    def ok(self) -> bool:
        return self.status is Status.OK

    @property
    def message(self) -> str:
        return self.status.message

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls) -> VerificationResult:
        return cls(Status.OK)


@dataclass(frozen=True, slots=True)
class RejectedKey:
    """
    A JWKS entry that was skipped while building a key set.

    ``index`` is the entry position in the ``keys`` array.
    """
    index: int
    status: Status
    reason: str = ""
