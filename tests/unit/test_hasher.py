"""Tests for digest helpers — algorithm preference and file hashing."""

from __future__ import annotations

import hashlib
from pathlib import Path

from modrinth_updater.core.hasher import (
    digest_hex,
    file_digests,
    preferred_algorithm,
)


class TestHasher:
    def test_digest_hex(self):
        assert digest_hex("sha256", b"mod") == hashlib.sha256(b"mod").hexdigest()
        assert digest_hex("sha1", b"mod") == hashlib.sha1(b"mod").hexdigest()

    def test_prefers_sha256(self):
        assert preferred_algorithm({"sha1": "a", "sha256": "b", "sha512": "c"}) == "sha256"

    def test_falls_back_to_sha1(self):
        assert preferred_algorithm({"sha1": "a", "sha512": "c"}) == "sha1"

    def test_empty_digest_is_absent(self):
        assert preferred_algorithm({"sha256": "", "sha1": "a"}) == "sha1"

    def test_none_available(self):
        assert preferred_algorithm({"sha512": "c"}) is None
        assert preferred_algorithm({}) is None

    def test_file_digests(self, tmp_path: Path):
        path = tmp_path / "a.jar"
        path.write_bytes(b"x" * 3_000_000)
        digests = file_digests(path)
        assert digests == {
            "sha256": hashlib.sha256(b"x" * 3_000_000).hexdigest(),
            "sha1": hashlib.sha1(b"x" * 3_000_000).hexdigest(),
        }
