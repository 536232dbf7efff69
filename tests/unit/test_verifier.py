"""Tests for IntegrityVerifier — algorithm choice and the policy gate."""

from __future__ import annotations

import hashlib

import pytest

from modrinth_updater.core.errors import IntegrityMismatch, NoIntegrityDigestAvailable
from modrinth_updater.core.verifier import IntegrityVerifier
from modrinth_updater.models.sync import VerifyStatus

DATA = b"mod jar bytes"
SHA256 = hashlib.sha256(DATA).hexdigest()
SHA1 = hashlib.sha1(DATA).hexdigest()


class TestVerify:
    def test_match_with_sha256(self):
        outcome = IntegrityVerifier.verify(DATA, {"sha256": SHA256, "sha1": SHA1})
        assert outcome.status is VerifyStatus.MATCH
        assert outcome.algorithm == "sha256"

    def test_only_strong_digest_checked(self):
        # A wrong sha1 is irrelevant when sha256 is present
        outcome = IntegrityVerifier.verify(DATA, {"sha256": SHA256, "sha1": "0" * 40})
        assert outcome.ok
        assert outcome.algorithm == "sha256"

    def test_sha256_mismatch_not_rescued_by_sha1(self):
        outcome = IntegrityVerifier.verify(DATA, {"sha256": "0" * 64, "sha1": SHA1})
        assert outcome.status is VerifyStatus.MISMATCH
        assert outcome.algorithm == "sha256"

    def test_sha1_fallback(self):
        outcome = IntegrityVerifier.verify(DATA, {"sha1": SHA1, "sha512": "ignored"})
        assert outcome.ok
        assert outcome.algorithm == "sha1"

    def test_uppercase_digest_accepted(self):
        assert IntegrityVerifier.verify(DATA, {"sha256": SHA256.upper()}).ok

    def test_no_digest(self):
        outcome = IntegrityVerifier.verify(DATA, {"sha512": "x"})
        assert outcome.status is VerifyStatus.NO_DIGEST_AVAILABLE


class TestAccept:
    def test_strict_mismatch_raises(self):
        verifier = IntegrityVerifier(allow_bypass=False)
        with pytest.raises(IntegrityMismatch) as info:
            verifier.accept("gamma", DATA, {"sha256": "0" * 64})
        assert info.value.artifact == "gamma"
        assert info.value.algorithm == "sha256"

    def test_permissive_mismatch_warns(self, events, sink):
        verifier = IntegrityVerifier(allow_bypass=True, events=events)
        outcome = verifier.accept("gamma", DATA, {"sha1": "0" * 40})
        assert outcome.status is VerifyStatus.MISMATCH
        assert sink.events[-1].level.value == "warn"
        assert sink.events[-1].artifact == "gamma"
        assert "Continuing anyway" in sink.events[-1].message

    @pytest.mark.parametrize("allow_bypass", [False, True])
    def test_no_digest_always_fatal(self, allow_bypass):
        verifier = IntegrityVerifier(allow_bypass=allow_bypass)
        with pytest.raises(NoIntegrityDigestAvailable):
            verifier.accept("delta", DATA, {})

    def test_match_returns_outcome(self):
        outcome = IntegrityVerifier().accept("alpha", DATA, {"sha256": SHA256})
        assert outcome.ok
