"""modrinth-updater data models — all Pydantic v2, all frozen (immutable)."""

from modrinth_updater.models.modlist import (
    CompatibilityConstraints,
    LoaderType,
    ModList,
    UnsafePolicy,
)
from modrinth_updater.models.releases import ReleaseFile, ReleaseRecord, StabilityClass
from modrinth_updater.models.sync import (
    ArtifactAction,
    ArtifactResult,
    ConfirmationKind,
    ConfirmationRequest,
    EventLevel,
    Failed,
    LocalArtifact,
    LocalSnapshot,
    ProgressEvent,
    Resolved,
    ResolutionOutcome,
    SyncReport,
    SyncStatus,
    VerifyOutcome,
    VerifyStatus,
)

__all__ = [
    # modlist
    "CompatibilityConstraints",
    "LoaderType",
    "ModList",
    "UnsafePolicy",
    # releases
    "ReleaseFile",
    "ReleaseRecord",
    "StabilityClass",
    # outcomes
    "Resolved",
    "Failed",
    "ResolutionOutcome",
    "VerifyOutcome",
    "VerifyStatus",
    # local state
    "LocalArtifact",
    "LocalSnapshot",
    # events
    "EventLevel",
    "ProgressEvent",
    "ConfirmationKind",
    "ConfirmationRequest",
    # report
    "ArtifactAction",
    "ArtifactResult",
    "SyncReport",
    "SyncStatus",
]
