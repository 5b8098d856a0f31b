"""
bundle.py
Locate files that live next to the raidgrow checkout:
- raidgrow.toml defaults at the project root
- ./bin with pinned mdadm/lvm helpers, preferred over the system PATH
"""
from __future__ import annotations
import os
from pathlib import Path

ROOT_MARKERS = ("raidgrow.toml", "main.py")


def bundle_root(start: Path | None = None) -> Path:
    """Nearest directory above the package holding raidgrow.toml or main.py."""
    pkg_dir = (start or Path(__file__)).resolve().parent
    for parent in pkg_dir.parents:
        if any((parent / marker).exists() for marker in ROOT_MARKERS):
            return parent
    return pkg_dir.parent


BUNDLE_DIR: Path = bundle_root()
BIN_DIR: Path = BUNDLE_DIR / "bin"
DEFAULT_CONFIG_PATH: str = str(BUNDLE_DIR / "raidgrow.toml")


def prepend_bin_to_path(bin_dir: Path = BIN_DIR) -> bool:
    """Put bin_dir first on PATH when it exists; True if PATH changed."""
    if not bin_dir.is_dir():
        return False
    os.environ["PATH"] = f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}"
    return True
