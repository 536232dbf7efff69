"""Integrity verifier — checks downloaded bytes against declared digests.

Exactly one algorithm is checked per file: sha256 when the release declares
one, sha1 otherwise. A file with neither is never accepted. A mismatch is
fatal under the strict policy and a logged warning under the permissive
one (``allowFailHash``).
"""

from __future__ import annotations

from collections.abc import Mapping

from modrinth_updater.core.errors import IntegrityMismatch, NoIntegrityDigestAvailable
from modrinth_updater.core.events import EventBus
from modrinth_updater.core.hasher import digest_hex, preferred_algorithm
from modrinth_updater.models.sync import VerifyOutcome, VerifyStatus


class IntegrityVerifier:
    """Applies the digest check and the hash policy gate.

    Parameters
    ----------
    allow_bypass:
        Accept mismatching bytes with a warning instead of failing.
    events:
        Bus receiving the mismatch warning under the permissive policy.
    """

    def __init__(self, allow_bypass: bool = False, events: EventBus | None = None) -> None:
        self._allow_bypass = allow_bypass
        self._events = events or EventBus()

    @property
    def allow_bypass(self) -> bool:
        return self._allow_bypass

    @staticmethod
    def verify(data: bytes, digests: Mapping[str, str]) -> VerifyOutcome:
        """Compare *data* against the strongest declared digest."""
        algorithm = preferred_algorithm(digests)
        if algorithm is None:
            return VerifyOutcome(status=VerifyStatus.NO_DIGEST_AVAILABLE)

        expected = digests[algorithm].lower()
        actual = digest_hex(algorithm, data)
        status = VerifyStatus.MATCH if actual == expected else VerifyStatus.MISMATCH
        return VerifyOutcome(
            status=status, algorithm=algorithm, expected=expected, actual=actual
        )

    def accept(
        self, identifier: str, data: bytes, digests: Mapping[str, str]
    ) -> VerifyOutcome:
        """Verify and apply the policy gate.

        Returns the outcome when the bytes may be staged.

        Raises
        ------
        NoIntegrityDigestAvailable
            Always, when no supported digest is declared.
        IntegrityMismatch
            On mismatch under the strict policy.
        """
        outcome = self.verify(data, digests)

        if outcome.status is VerifyStatus.NO_DIGEST_AVAILABLE:
            raise NoIntegrityDigestAvailable(
                "Release file declares no sha256 or sha1 digest; refusing to install",
                artifact=identifier,
            )

        if outcome.status is VerifyStatus.MISMATCH:
            message = (
                f"Hash mismatch with {outcome.algorithm}! "
                f"expected {outcome.expected}, got {outcome.actual}"
            )
            if not self._allow_bypass:
                raise IntegrityMismatch(
                    message, artifact=identifier, algorithm=outcome.algorithm or ""
                )
            self._events.warn(identifier, f"{message}. Continuing anyway...")

        return outcome
