"""Digest helpers shared by verification and change detection.

Both components must agree on which algorithm is used for a given release
file, so the preference order lives here and nowhere else.
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping
from pathlib import Path

# Strongest first. Only these are ever compared, even if the registry
# publishes others (e.g. sha512).
ALGORITHM_PREFERENCE: tuple[str, ...] = ("sha256", "sha1")

_CHUNK_SIZE = 1024 * 1024


def digest_hex(algorithm: str, data: bytes) -> str:
    """Return the hex digest of *data* under a named algorithm."""
    return hashlib.new(algorithm, data).hexdigest()


def preferred_algorithm(digests: Mapping[str, str]) -> str | None:
    """Pick the strongest algorithm that has a non-empty digest.

    Returns None when none of the supported algorithms is present.
    """
    for algorithm in ALGORITHM_PREFERENCE:
        if digests.get(algorithm):
            return algorithm
    return None


def file_digests(path: Path) -> dict[str, str]:
    """Hash a file once with every supported algorithm.

    Reads in chunks so large artifacts are never held in memory twice.
    """
    hashers = {name: hashlib.new(name) for name in ALGORITHM_PREFERENCE}
    with Path(path).open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            for h in hashers.values():
                h.update(chunk)
    return {name: h.hexdigest() for name, h in hashers.items()}
