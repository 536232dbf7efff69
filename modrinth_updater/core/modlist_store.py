"""Reading and bootstrapping the ``.modlist.json`` file in a mods folder."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from modrinth_updater.models.modlist import ModList

logger = logging.getLogger(__name__)

DEFAULT_MODLIST: dict = {
    "minecraftVersion": "1.19.2",
    "loaderType": "fabric",
    "unsafe": {
        "allowFailHash": False,
        "allowUnstable": False,
        "allowProprietary": True,
    },
    "mods": [],
}


class ModListError(ValueError):
    """Raised when a modlist file cannot be read or fails validation."""


def write_default_modlist(path: Path) -> bool:
    """Create *path* with the default modlist unless it already exists.

    Returns True if the file was created.
    """
    path = Path(path)
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(DEFAULT_MODLIST, indent="\t") + "\n", encoding="utf-8")
    logger.debug("Generated default config at %s", path)
    return True


def load_modlist(path: Path) -> ModList:
    """Parse and validate a modlist file."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ModListError(f"Could not read config file {path}: {exc}") from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ModListError(f"Could not parse config file {path}: {exc}") from exc

    try:
        return ModList.model_validate(data)
    except ValidationError as exc:
        raise ModListError(f"Invalid config file {path}!\n{exc}") from exc


def load_or_create_modlist(path: Path) -> tuple[ModList, bool]:
    """Load the modlist, writing the default first if there is none.

    Returns ``(modlist, created)``.
    """
    created = write_default_modlist(path)
    return load_modlist(path), created
