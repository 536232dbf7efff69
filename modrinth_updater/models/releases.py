"""Registry release models — what a version query returns.

Wire names follow the Modrinth v2 ``/project/{id}/version`` payload.
Unknown fields are ignored so additions on the registry side never break
parsing. A record without ``version_type`` is rejected, since its stability
cannot be judged.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StabilityClass(str, Enum):
    """Whether a release is marked as a full release by its author."""

    STABLE = "stable"
    UNSTABLE = "unstable"


class ReleaseFile(BaseModel):
    """One downloadable file of a release."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    download_url: str = Field(..., alias="url")
    filename: str
    is_primary: bool = Field(False, alias="primary")
    digests: dict[str, str] = Field(default_factory=dict, alias="hashes")


class ReleaseRecord(BaseModel):
    """One published version of a project."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    version_type: str
    files: list[ReleaseFile] = Field(default_factory=list)

    @property
    def stability_class(self) -> StabilityClass:
        if self.version_type == "release":
            return StabilityClass.STABLE
        return StabilityClass.UNSTABLE

    @property
    def is_stable(self) -> bool:
        return self.stability_class is StabilityClass.STABLE

    def primary_file(self) -> ReleaseFile | None:
        """The file flagged primary, else the first file, else None."""
        for release_file in self.files:
            if release_file.is_primary:
                return release_file
        return self.files[0] if self.files else None
