"""Staged replacement of the mods folder.

Verified downloads are written into a staging directory beside the mods
folder. Nothing in the mods folder changes until ``swap()``, which runs
in a fixed order:

1. delete every installed artifact that is not kept,
2. move every file staged during this run into the mods folder,
3. remove the staging directory.

Deletion always precedes moving. If the process dies between 1 and 2 the
deleted mods are missing until the next run; staged files are still in
the staging directory.
"""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import threading
from collections.abc import Iterable
from pathlib import Path

from modrinth_updater.core.errors import FilesystemError

logger = logging.getLogger(__name__)

_PARTIAL_SUFFIX = ".part"


class StagedReplacer:
    """Owns the staging directory for one mods folder.

    Parameters
    ----------
    target_dir:
        The mods folder being synchronized.
    staging_dir:
        Transient directory holding verified downloads until the swap.
    """

    def __init__(self, target_dir: Path, staging_dir: Path) -> None:
        self._target = Path(target_dir)
        self._staging = Path(staging_dir)
        self._staged: set[str] = set()
        self._lock = threading.Lock()

    @property
    def target_dir(self) -> Path:
        return self._target

    @property
    def staging_dir(self) -> Path:
        return self._staging

    @property
    def staged(self) -> list[str]:
        """Filenames staged during this run, sorted."""
        with self._lock:
            return sorted(self._staged)

    # ------------------------------------------------------------------
    # Staging
    # ------------------------------------------------------------------

    def create_staging(self) -> Path:
        """Create the staging directory.

        An existing directory, left behind by an aborted run, is reused;
        its stale contents are never moved and are removed by the swap.
        """
        try:
            self._staging.mkdir()
        except FileExistsError:
            if not self._staging.is_dir():
                raise FilesystemError(
                    f"Staging path {self._staging} exists and is not a directory"
                ) from None
            logger.warning("Reusing staging directory left by a previous run: %s", self._staging)
        except OSError as exc:
            raise FilesystemError(
                f"Failed to create staging directory {self._staging}: {exc}"
            ) from exc
        return self._staging

    def stage(self, filename: str, data: bytes, *, artifact: str | None = None) -> Path:
        """Write verified bytes into staging under *filename*.

        Bytes go to a ``.part`` file first and are renamed into place, so a
        staged name never refers to a partially written file.
        """
        if Path(filename).name != filename or filename in ("", ".", ".."):
            raise FilesystemError(f"Refusing to stage unsafe filename {filename!r}", artifact=artifact)

        final = self._staging / filename
        partial = self._staging / f"{filename}{_PARTIAL_SUFFIX}"
        try:
            partial.write_bytes(data)
            os.replace(partial, final)
        except OSError as exc:
            raise FilesystemError(
                f"Failed to write {filename} into staging: {exc}", artifact=artifact
            ) from exc

        with self._lock:
            self._staged.add(filename)
        return final

    async def astage(self, filename: str, data: bytes, *, artifact: str | None = None) -> Path:
        """``stage()`` in a worker thread."""
        return await asyncio.to_thread(self.stage, filename, data, artifact=artifact)

    # ------------------------------------------------------------------
    # Swap
    # ------------------------------------------------------------------

    def swap(self, installed: Iterable[str], keep: Iterable[str]) -> tuple[list[str], list[str]]:
        """Replace the installed artifact set with the staged one.

        Parameters
        ----------
        installed:
            Artifact filenames present in the mods folder at snapshot time.
        keep:
            Filenames that are already current and must not be touched.

        Returns
        -------
        (deleted, moved) filename lists.
        """
        keep_set = set(keep)
        deleted: list[str] = []
        moved: list[str] = []

        for filename in sorted(set(installed) - keep_set):
            try:
                (self._target / filename).unlink(missing_ok=True)
            except OSError as exc:
                raise FilesystemError(f"Failed to remove old mod {filename}: {exc}") from exc
            deleted.append(filename)
        logger.info("Removed %d old mod(s)", len(deleted))

        for filename in self.staged:
            try:
                shutil.move(str(self._staging / filename), str(self._target / filename))
            except OSError as exc:
                raise FilesystemError(f"Failed to move {filename} into place: {exc}") from exc
            moved.append(filename)
        logger.info("Moved %d new mod(s) into %s", len(moved), self._target)

        self.discard()
        return deleted, moved

    def discard(self) -> None:
        """Remove the staging directory and everything in it."""
        try:
            shutil.rmtree(self._staging)
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise FilesystemError(
                f"Failed to remove staging directory {self._staging}: {exc}"
            ) from exc
        with self._lock:
            self._staged.clear()
