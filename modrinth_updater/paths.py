"""Default location of the Minecraft mods folder per operating system."""

from __future__ import annotations

import os
import sys
from pathlib import Path


def default_mods_folder(
    platform: str | None = None,
    environ: dict[str, str] | None = None,
) -> Path | None:
    """Return the standard ``.minecraft/mods`` path, or None if unknown."""
    platform = platform or sys.platform
    env = os.environ if environ is None else environ

    if platform == "win32":
        appdata = env.get("APPDATA")
        if appdata:
            return Path(appdata) / ".minecraft" / "mods"
        username = env.get("USERNAME")
        if not username:
            return None
        return Path(f"C:\\Users\\{username}\\AppData\\Roaming") / ".minecraft" / "mods"

    home = env.get("HOME")
    if not home:
        return None
    if platform.startswith("linux"):
        return Path(home) / ".minecraft" / "mods"
    if platform == "darwin":
        return Path(home) / "Library" / "Application Support" / ".minecraft" / "mods"
    return None
