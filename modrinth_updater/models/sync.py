"""Per-run models: outcomes, local snapshots, events, and the run report.

None of these outlive a single run. They are recomputed from the registry
and the mods folder every time.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Union

from pydantic import BaseModel, ConfigDict, Field

from modrinth_updater.models.releases import ReleaseFile


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class Resolved(BaseModel):
    """An identifier resolved to exactly one release file."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    artifact_filename: str
    release_id: str
    release_file: ReleaseFile
    platform_version: str  # version the match was found at (may be degraded)
    stable: bool = True


class Failed(BaseModel):
    """An identifier that could not be carried through its pipeline."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    reason: str
    error_kind: str = "SyncError"


ResolutionOutcome = Union[Resolved, Failed]


# ---------------------------------------------------------------------------
# Integrity
# ---------------------------------------------------------------------------


class VerifyStatus(str, Enum):
    MATCH = "match"
    MISMATCH = "mismatch"
    NO_DIGEST_AVAILABLE = "no_digest_available"


class VerifyOutcome(BaseModel):
    """Result of checking bytes against a release's declared digests."""

    model_config = ConfigDict(frozen=True)

    status: VerifyStatus
    algorithm: str | None = None
    expected: str | None = None
    actual: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is VerifyStatus.MATCH


# ---------------------------------------------------------------------------
# Local state
# ---------------------------------------------------------------------------


class LocalArtifact(BaseModel):
    """An artifact file currently present in the mods folder."""

    model_config = ConfigDict(frozen=True)

    filename: str
    digests: dict[str, str]


class LocalSnapshot(BaseModel):
    """Every artifact in the mods folder at the start of a run, by filename."""

    model_config = ConfigDict(frozen=True)

    directory: Path
    artifacts: dict[str, LocalArtifact] = Field(default_factory=dict)

    def get(self, filename: str) -> LocalArtifact | None:
        return self.artifacts.get(filename)

    @property
    def filenames(self) -> list[str]:
        return sorted(self.artifacts)


# ---------------------------------------------------------------------------
# Events and confirmations
# ---------------------------------------------------------------------------


class EventLevel(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    SUCCESS = "success"


class ProgressEvent(BaseModel):
    """A structured progress message. Rendering is up to the sinks."""

    model_config = ConfigDict(frozen=True)

    level: EventLevel
    message: str
    artifact: str | None = None


class ConfirmationKind(str, Enum):
    DEGRADE_PLATFORM_VERSION = "degrade_platform_version"
    APPLY_SWAP = "apply_swap"


class ConfirmationRequest(BaseModel):
    """A yes/no decision the engine needs from the operator."""

    model_config = ConfigDict(frozen=True)

    kind: ConfirmationKind
    message: str
    artifact: str | None = None
    details: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


class ArtifactAction(str, Enum):
    KEEP = "keep"
    DOWNLOAD = "download"
    FAILED = "failed"


class ArtifactResult(BaseModel):
    """What happened (or would happen) to one configured artifact."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    action: ArtifactAction
    filename: str | None = None
    release_id: str | None = None
    platform_version: str | None = None
    error: str | None = None
    error_kind: str | None = None


class SyncStatus(str, Enum):
    UPDATED = "updated"
    UP_TO_DATE = "up_to_date"
    PLANNED = "planned"
    DECLINED = "declined"
    ABORTED = "aborted"


class SyncReport(BaseModel):
    """Outcome of one engine run, in modlist order."""

    model_config = ConfigDict(frozen=True)

    status: SyncStatus
    target_dir: Path
    results: list[ArtifactResult] = Field(default_factory=list)
    deleted: list[str] = Field(default_factory=list)
    installed: list[str] = Field(default_factory=list)

    @property
    def failures(self) -> list[ArtifactResult]:
        return [r for r in self.results if r.action is ArtifactAction.FAILED]

    @property
    def kept(self) -> list[ArtifactResult]:
        return [r for r in self.results if r.action is ArtifactAction.KEEP]
