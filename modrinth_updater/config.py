"""Runtime settings — env-driven, separate from the per-folder modlist.

Reads from a .env file and MODRINTH_UPDATER_* environment variables. The
modlist (which mods, which game version) lives in the mods folder itself;
these settings only describe how the tool talks to the registry and lays
out files.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class UpdaterSettings(BaseSettings):
    """Runtime settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export MODRINTH_UPDATER_LOG_LEVEL=DEBUG
        export MODRINTH_UPDATER_API_BASE_URL=https://staging-api.modrinth.com/v2
        export MODRINTH_UPDATER_MAX_CONCURRENT_PIPELINES=4
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="MODRINTH_UPDATER_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Registry
    api_base_url: str = "https://api.modrinth.com/v2"
    user_agent: str = "modrinth-updater/1.1.0"

    # Observability
    log_level: str = "INFO"
    debug: bool = False

    # Filesystem layout
    artifact_extension: str = ".jar"
    modlist_filename: str = ".modlist.json"
    staging_suffix: str = ".modrinth-updater-staging"

    # Concurrency
    max_concurrent_pipelines: int = 8

    def staging_path_for(self, target_dir: Path) -> Path:
        """Return the staging directory used for *target_dir*.

        The staging directory is a hidden sibling of the mods folder, so
        moving staged files into place is a same-filesystem rename.
        """
        target_dir = Path(target_dir)
        return target_dir.parent / f".{target_dir.name}{self.staging_suffix}"

    def artifact_filename(self, identifier: str) -> str:
        """Local filename an artifact identifier is installed under."""
        return f"{identifier}{self.artifact_extension}"


# Module-level singleton — import as `from modrinth_updater.config import settings`
settings = UpdaterSettings()
