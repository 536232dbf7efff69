"""Change detection — skip downloads for mods that are already current.

The mods folder is hashed once per run into a ``LocalSnapshot``. A resolved
mod needs an update unless a file with its local name exists and matches
the release's digest under the same algorithm the verifier would use.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path

from modrinth_updater.core.errors import FilesystemError
from modrinth_updater.core.hasher import file_digests, preferred_algorithm
from modrinth_updater.models.sync import LocalArtifact, LocalSnapshot

logger = logging.getLogger(__name__)


def needs_update(
    resolved_filename: str,
    resolved_digests: Mapping[str, str],
    snapshot: LocalSnapshot,
) -> bool:
    """Return False only when the installed file already matches."""
    local = snapshot.get(resolved_filename)
    if local is None:
        return True

    algorithm = preferred_algorithm(resolved_digests)
    if algorithm is None:
        return True

    return local.digests.get(algorithm) != resolved_digests[algorithm].lower()


def _hash_artifact(path: Path) -> LocalArtifact:
    return LocalArtifact(
        filename=path.name,
        digests=file_digests(path),
    )


async def take_snapshot(directory: Path, extension: str = ".jar") -> LocalSnapshot:
    """Hash every artifact file directly inside *directory*.

    Only regular files ending in *extension* are considered; the modlist
    and anything else in the folder are ignored. Files are hashed in
    worker threads.
    """
    directory = Path(directory)
    try:
        paths = sorted(
            p for p in directory.iterdir() if p.is_file() and p.name.endswith(extension)
        )
    except OSError as exc:
        raise FilesystemError(f"Cannot read mods folder {directory}: {exc}") from exc

    try:
        artifacts = await asyncio.gather(
            *(asyncio.to_thread(_hash_artifact, p) for p in paths)
        )
    except OSError as exc:
        raise FilesystemError(f"Cannot hash installed mods: {exc}") from exc

    logger.debug("Snapshot of %s: %d artifact(s)", directory, len(artifacts))
    return LocalSnapshot(
        directory=directory,
        artifacts={a.filename: a for a in artifacts},
    )
