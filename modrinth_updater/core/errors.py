"""Error taxonomy for sync runs.

Every error raised inside a per-mod pipeline names the mod it belongs to,
so the run report can say which mod failed and why.
"""

from __future__ import annotations


class SyncError(RuntimeError):
    """Base class for every failure the sync engine knows how to report."""

    def __init__(self, message: str, *, artifact: str | None = None) -> None:
        super().__init__(message)
        self.artifact = artifact

    @property
    def kind(self) -> str:
        return type(self).__name__


class RegistryUnreachable(SyncError):
    """The registry could not be reached (transport error or 5xx)."""


class RegistryBadResponse(SyncError):
    """The registry answered, but not with a usable release list."""


class NoCompatibleRelease(SyncError):
    """No release matches the platform version, loader and stability policy."""


class NoIntegrityDigestAvailable(SyncError):
    """A release file carries neither a sha256 nor a sha1 digest."""


class IntegrityMismatch(SyncError):
    """Downloaded bytes do not match the release's declared digest."""

    def __init__(
        self,
        message: str,
        *,
        artifact: str | None = None,
        algorithm: str = "",
    ) -> None:
        super().__init__(message, artifact=artifact)
        self.algorithm = algorithm


class DownloadFailed(SyncError):
    """A release file could not be downloaded."""


class FilesystemError(SyncError):
    """Creating staging, deleting or moving a file failed."""
