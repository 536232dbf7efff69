"""Sync engine — the central coordinator for an update run.

The engine wires the RegistryClient, VersionResolver, IntegrityVerifier,
change detection and StagedReplacer together:

1. Snapshot and hash the installed mods.
2. Create the staging directory.
3. Run one pipeline per mod concurrently (resolve, detect, download,
   verify, stage) and wait for all of them.
4. If any pipeline failed, stop: the mods folder is left untouched and
   the report lists every failure.
5. Otherwise ask for confirmation and swap the staged set into place.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from modrinth_updater.config import UpdaterSettings
from modrinth_updater.core.change_detector import needs_update, take_snapshot
from modrinth_updater.core.errors import NoIntegrityDigestAvailable, SyncError
from modrinth_updater.core.events import EventBus
from modrinth_updater.core.hasher import preferred_algorithm
from modrinth_updater.core.registry_client import RegistryClient
from modrinth_updater.core.resolver import VersionResolver
from modrinth_updater.core.staged_replacer import StagedReplacer
from modrinth_updater.core.verifier import IntegrityVerifier
from modrinth_updater.models.modlist import CompatibilityConstraints, ModList
from modrinth_updater.models.sync import (
    ArtifactAction,
    ArtifactResult,
    ConfirmationKind,
    ConfirmationRequest,
    Failed,
    LocalSnapshot,
    SyncReport,
    SyncStatus,
)

logger = logging.getLogger(__name__)

Confirm = Callable[[ConfirmationRequest], bool]


def _decline(request: ConfirmationRequest) -> bool:
    return False


class SyncEngine:
    """Synchronizes one mods folder with its modlist.

    Parameters
    ----------
    modlist:
        Validated modlist for this folder.
    target_dir:
        The mods folder.
    confirm:
        Yes/no callback for version degradation and for the final swap.
        Defaults to declining everything.
    registry:
        Registry client. One is created (and closed after the run) if not
        provided.
    events:
        Event bus for progress output.
    settings:
        Runtime settings. Uses defaults if not provided.
    """

    def __init__(
        self,
        modlist: ModList,
        target_dir: Path,
        *,
        confirm: Confirm | None = None,
        registry: RegistryClient | None = None,
        events: EventBus | None = None,
        settings: UpdaterSettings | None = None,
    ) -> None:
        self.modlist = modlist
        self.target_dir = Path(target_dir)
        self.settings = settings or UpdaterSettings()
        self.events = events or EventBus()
        self._confirm_cb = confirm or _decline
        self._registry = registry
        self._owns_registry = registry is None
        self._confirm_lock: asyncio.Lock | None = None

    @property
    def staging_dir(self) -> Path:
        return self.settings.staging_path_for(self.target_dir)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def run(self) -> SyncReport:
        """Run a full update: resolve, download, verify, swap."""
        registry = self._open_registry()
        try:
            return await self._run(registry)
        finally:
            if self._owns_registry:
                await registry.aclose()

    async def plan(self) -> SyncReport:
        """Resolve every mod and report what a run would do.

        Nothing is downloaded and nothing on disk changes.
        """
        registry = self._open_registry()
        try:
            snapshot = await take_snapshot(self.target_dir, self.settings.artifact_extension)
            results = await self._run_pipelines(registry, snapshot, replacer=None)
            keep = {r.filename for r in results if r.action is ArtifactAction.KEEP}
            return SyncReport(
                status=SyncStatus.ABORTED if self._failed(results) else SyncStatus.PLANNED,
                target_dir=self.target_dir,
                results=results,
                deleted=sorted(set(snapshot.filenames) - keep),
                installed=sorted(
                    r.filename for r in results
                    if r.action is ArtifactAction.DOWNLOAD and r.filename
                ),
            )
        finally:
            if self._owns_registry:
                await registry.aclose()

    def run_sync(self) -> SyncReport:
        """Blocking wrapper around ``run()`` for non-async callers."""
        return asyncio.run(self.run())

    def plan_sync(self) -> SyncReport:
        """Blocking wrapper around ``plan()``."""
        return asyncio.run(self.plan())

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def _run(self, registry: RegistryClient) -> SyncReport:
        constraints = self.modlist.constraints
        self.events.info(
            None,
            f"Syncing {len(self.modlist.artifacts)} mod(s) for "
            f"{constraints.loader_type.value} {constraints.platform_version} "
            f"into {self.target_dir}",
        )

        snapshot = await take_snapshot(self.target_dir, self.settings.artifact_extension)
        replacer = StagedReplacer(self.target_dir, self.staging_dir)
        replacer.create_staging()

        self.events.info(None, "Beginning download process...")
        results = await self._run_pipelines(registry, snapshot, replacer)

        failures = self._failed(results)
        if failures:
            self.events.error(
                None,
                f"Aborting: {len(failures)} mod(s) failed; the mods folder was not "
                f"changed. Downloaded files were left in {replacer.staging_dir}.",
            )
            return SyncReport(
                status=SyncStatus.ABORTED,
                target_dir=self.target_dir,
                results=results,
            )

        self.events.info(None, "Finished downloading all mods!")

        keep = {r.filename for r in results if r.action is ArtifactAction.KEEP}
        to_delete = sorted(set(snapshot.filenames) - keep)
        to_install = replacer.staged

        if not to_delete and not to_install:
            replacer.discard()
            self.events.success(None, "Everything is already up to date!")
            return SyncReport(
                status=SyncStatus.UP_TO_DATE,
                target_dir=self.target_dir,
                results=results,
            )

        request = ConfirmationRequest(
            kind=ConfirmationKind.APPLY_SWAP,
            message=(
                f"Remove {len(to_delete)} old mod(s) and install "
                f"{len(to_install)} new mod(s) in {self.target_dir}?"
            ),
            details=[f"remove  {f}" for f in to_delete]
            + [f"install {f}" for f in to_install],
        )
        if not await self._confirm(request):
            replacer.discard()
            self.events.warn(None, "Update cancelled; the mods folder was not changed.")
            return SyncReport(
                status=SyncStatus.DECLINED,
                target_dir=self.target_dir,
                results=results,
            )

        self.events.info(None, "Removing old mods and moving new mods into place...")
        deleted, moved = replacer.swap(snapshot.filenames, keep)
        self.events.success(None, "Done updating!")

        return SyncReport(
            status=SyncStatus.UPDATED,
            target_dir=self.target_dir,
            results=results,
            deleted=deleted,
            installed=moved,
        )

    # ------------------------------------------------------------------
    # Pipelines
    # ------------------------------------------------------------------

    async def _run_pipelines(
        self,
        registry: RegistryClient,
        snapshot: LocalSnapshot,
        replacer: StagedReplacer | None,
    ) -> list[ArtifactResult]:
        constraints = self.modlist.constraints
        resolver = VersionResolver(
            registry, events=self.events, confirm=self._confirm, settings=self.settings
        )
        verifier = IntegrityVerifier(
            allow_bypass=constraints.allow_integrity_bypass, events=self.events
        )
        semaphore = asyncio.Semaphore(max(1, self.settings.max_concurrent_pipelines))

        async def bounded(identifier: str) -> ArtifactResult:
            async with semaphore:
                try:
                    return await self._pipeline(
                        identifier, constraints, snapshot,
                        registry, resolver, verifier, replacer,
                    )
                except SyncError as exc:
                    self.events.error(identifier, f"{exc.kind}: {exc}")
                    return ArtifactResult(
                        identifier=identifier,
                        action=ArtifactAction.FAILED,
                        error=str(exc),
                        error_kind=exc.kind,
                    )

        # gather preserves modlist order in the results
        return list(await asyncio.gather(*(bounded(i) for i in self.modlist.artifacts)))

    async def _pipeline(
        self,
        identifier: str,
        constraints: CompatibilityConstraints,
        snapshot: LocalSnapshot,
        registry: RegistryClient,
        resolver: VersionResolver,
        verifier: IntegrityVerifier,
        replacer: StagedReplacer | None,
    ) -> ArtifactResult:
        self.events.info(identifier, "Fetching latest release...")
        outcome = await resolver.resolve(identifier, constraints)
        if isinstance(outcome, Failed):
            self.events.error(identifier, f"{outcome.error_kind}: {outcome.reason}")
            return ArtifactResult(
                identifier=identifier,
                action=ArtifactAction.FAILED,
                error=outcome.reason,
                error_kind=outcome.error_kind,
            )

        release_file = outcome.release_file
        result = ArtifactResult(
            identifier=identifier,
            action=ArtifactAction.DOWNLOAD,
            filename=outcome.artifact_filename,
            release_id=outcome.release_id,
            platform_version=outcome.platform_version,
        )

        if preferred_algorithm(release_file.digests) is None:
            raise NoIntegrityDigestAvailable(
                f"Release {outcome.release_id} declares no sha256 or sha1 digest; "
                "refusing to download",
                artifact=identifier,
            )

        if not needs_update(outcome.artifact_filename, release_file.digests, snapshot):
            self.events.success(identifier, "Already up to date!")
            return result.model_copy(update={"action": ArtifactAction.KEEP})

        if replacer is None:
            self.events.info(identifier, f"Update available: release {outcome.release_id}")
            return result

        self.events.info(identifier, f"Downloading {release_file.filename}...")
        data = await registry.download(identifier, release_file.download_url)

        verified = await asyncio.to_thread(
            verifier.accept, identifier, data, release_file.digests
        )
        await replacer.astage(outcome.artifact_filename, data, artifact=identifier)

        if verified.ok:
            self.events.success(identifier, f"Downloaded, hash verified with {verified.algorithm}!")
        else:
            self.events.success(identifier, "Downloaded.")
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _open_registry(self) -> RegistryClient:
        if self._registry is None or self._owns_registry:
            self._registry = RegistryClient(self.settings)
        return self._registry

    async def _confirm(self, request: ConfirmationRequest) -> bool:
        """Ask the operator, one question at a time."""
        if self._confirm_lock is None:
            self._confirm_lock = asyncio.Lock()
        async with self._confirm_lock:
            answer = await asyncio.to_thread(self._confirm_cb, request)
        logger.debug("Confirmation %s -> %s", request.kind.value, answer)
        return bool(answer)

    @staticmethod
    def _failed(results: list[ArtifactResult]) -> list[ArtifactResult]:
        return [r for r in results if r.action is ArtifactAction.FAILED]
