"""Version resolver — picks exactly one release file per mod.

Selection rules, in order:
1. Query the registry for the configured game version and loader.
2. Drop unstable releases unless the modlist allows them.
3. Take the first remaining release (the registry lists newest first).
4. If nothing remains and the game version has a patch component, ask
   whether to retry once at ``major.minor``.
5. From the chosen release take the primary file, else the first file.

A chosen release without files fails the mod; later releases are not
consulted.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from modrinth_updater.config import UpdaterSettings
from modrinth_updater.core.errors import NoCompatibleRelease, SyncError
from modrinth_updater.core.events import EventBus
from modrinth_updater.core.registry_client import RegistryClient
from modrinth_updater.models.modlist import CompatibilityConstraints
from modrinth_updater.models.releases import ReleaseRecord
from modrinth_updater.models.sync import (
    ConfirmationKind,
    ConfirmationRequest,
    Failed,
    Resolved,
    ResolutionOutcome,
)

logger = logging.getLogger(__name__)

AsyncConfirm = Callable[[ConfirmationRequest], Awaitable[bool]]


def degrade_platform_version(version: str) -> str | None:
    """Drop exactly one trailing component: ``1.19.2`` becomes ``1.19`` and
    ``1.19.3.4`` becomes ``1.19.3``.

    Returns None when the version has two or fewer components, since
    degradation never goes below ``major.minor``.
    """
    parts = version.split(".")
    if len(parts) <= 2:
        return None
    return ".".join(parts[:-1])


async def _never_confirm(request: ConfirmationRequest) -> bool:
    return False


class VersionResolver:
    """Resolves mod identifiers against the registry.

    Parameters
    ----------
    registry:
        Client used for version queries.
    events:
        Bus receiving warnings (unstable picks, degradation).
    confirm:
        Async yes/no callback consulted before degrading the game version.
        Defaults to always declining.
    settings:
        Supplies the local filename convention.
    """

    def __init__(
        self,
        registry: RegistryClient,
        events: EventBus | None = None,
        confirm: AsyncConfirm | None = None,
        settings: UpdaterSettings | None = None,
    ) -> None:
        self._registry = registry
        self._events = events or EventBus()
        self._confirm = confirm or _never_confirm
        self._settings = settings or UpdaterSettings()

    async def resolve(
        self, identifier: str, constraints: CompatibilityConstraints
    ) -> ResolutionOutcome:
        """Resolve one identifier. Errors become a ``Failed`` outcome."""
        try:
            return await self._resolve(identifier, constraints)
        except SyncError as exc:
            return Failed(identifier=identifier, reason=str(exc), error_kind=exc.kind)

    async def _resolve(
        self, identifier: str, constraints: CompatibilityConstraints
    ) -> Resolved:
        version = constraints.platform_version
        record = await self._select(identifier, version, constraints)

        if record is None:
            degraded = degrade_platform_version(version)
            if degraded is None:
                raise NoCompatibleRelease(
                    f"No files found for {constraints.loader_type.value} {version}",
                    artifact=identifier,
                )
            confirmed = await self._confirm(
                ConfirmationRequest(
                    kind=ConfirmationKind.DEGRADE_PLATFORM_VERSION,
                    artifact=identifier,
                    message=(
                        f"No compatible release of {identifier} for {version}. "
                        f"Look for one built for {degraded} instead?"
                    ),
                )
            )
            if not confirmed:
                raise NoCompatibleRelease(
                    f"No files found for {constraints.loader_type.value} {version} "
                    f"(fallback to {degraded} declined)",
                    artifact=identifier,
                )
            self._events.warn(identifier, f"Falling back from {version} to {degraded}")
            record = await self._select(identifier, degraded, constraints)
            if record is None:
                raise NoCompatibleRelease(
                    f"No files found for {constraints.loader_type.value} "
                    f"{version} or {degraded}",
                    artifact=identifier,
                )
            version = degraded

        if not record.is_stable:
            self._events.warn(
                identifier,
                f"Selected unstable release {record.id} ({record.version_type}). "
                "It's not guaranteed to work; if your game crashes, this mod is "
                "the likely cause.",
            )

        release_file = record.primary_file()
        if release_file is None:
            raise NoCompatibleRelease(
                f"Latest release {record.id} has no files", artifact=identifier
            )

        logger.debug("%s resolved to %s (%s)", identifier, record.id, release_file.filename)
        return Resolved(
            identifier=identifier,
            artifact_filename=self._settings.artifact_filename(identifier),
            release_id=record.id,
            release_file=release_file,
            platform_version=version,
            stable=record.is_stable,
        )

    async def _select(
        self,
        identifier: str,
        platform_version: str,
        constraints: CompatibilityConstraints,
    ) -> ReleaseRecord | None:
        records = await self._registry.query_releases(
            identifier, platform_version, constraints.loader_type
        )
        eligible = [r for r in records if r.is_stable or constraints.allow_unstable]
        return eligible[0] if eligible else None
