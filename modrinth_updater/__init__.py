"""modrinth-updater: keep a mods folder in sync with Modrinth.

Every run resolves each configured mod to the latest compatible release,
verifies its digest, and swaps the resolved set into the mods folder only
after every download has succeeded:
  - Concurrent per-mod pipelines (resolve, detect, download, verify, stage)
  - sha256 preferred, sha1 fallback, strict or permissive hash policy
  - Unchanged mods are kept in place and never re-downloaded
  - Staging directory beside the mods folder, delete-then-move swap
"""

__version__ = "1.1.0"
__description__ = "Keep a Minecraft mods folder in sync with Modrinth releases"

from modrinth_updater.core.engine import SyncEngine
from modrinth_updater.models.modlist import ModList

__all__ = ["SyncEngine", "ModList", "__version__"]
