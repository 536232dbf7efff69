"""Modlist configuration models — the declarative input of a sync run."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoaderType(str, Enum):
    """Mod loaders the registry can filter releases by."""

    FABRIC = "fabric"
    FORGE = "forge"
    QUILT = "quilt"
    LITELOADER = "liteloader"


class UnsafePolicy(BaseModel):
    """Opt-in relaxations of the default safety policy.

    ``allowProprietary`` is accepted in the file for compatibility with
    existing modlists but has no effect.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    allow_integrity_bypass: bool = Field(False, alias="allowFailHash")
    allow_unstable: bool = Field(False, alias="allowUnstable")


class CompatibilityConstraints(BaseModel):
    """What a release must be compatible with to be selected.

    Immutable for the duration of a run.
    """

    model_config = ConfigDict(frozen=True)

    platform_version: str
    loader_type: LoaderType
    allow_unstable: bool = False
    allow_integrity_bypass: bool = False


class ModList(BaseModel):
    """The validated contents of a ``.modlist.json`` file.

    Field aliases match the on-disk JSON keys (``minecraftVersion``,
    ``loaderType``, ``unsafe``, ``mods``).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    platform_version: str = Field(..., alias="minecraftVersion", min_length=1)
    loader_type: LoaderType = Field(..., alias="loaderType")
    policy: UnsafePolicy = Field(default_factory=UnsafePolicy, alias="unsafe")
    artifacts: list[str] = Field(default_factory=list, alias="mods")

    @field_validator("artifacts")
    @classmethod
    def _unique_identifiers(cls, value: list[str]) -> list[str]:
        seen: set[str] = set()
        duplicates: list[str] = []
        for identifier in value:
            if not identifier:
                raise ValueError("mod identifiers must be non-empty")
            if identifier in seen and identifier not in duplicates:
                duplicates.append(identifier)
            seen.add(identifier)
        if duplicates:
            raise ValueError(f"duplicate mod identifiers: {', '.join(duplicates)}")
        return value

    @property
    def constraints(self) -> CompatibilityConstraints:
        """Project the modlist onto the constraints used for resolution."""
        return CompatibilityConstraints(
            platform_version=self.platform_version,
            loader_type=self.loader_type,
            allow_unstable=self.policy.allow_unstable,
            allow_integrity_bypass=self.policy.allow_integrity_bypass,
        )
