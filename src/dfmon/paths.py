from __future__ import annotations
from pathlib import Path


MOUNTS_FILE = "/proc/mounts"


def mounts_file() -> Path:
    """Kernel mount table (Linux only)."""
    return Path(MOUNTS_FILE)


def config_dir() -> Path:
    """User config folder (Linux standard)."""
    return Path.home() / ".config" / "dfmon"


def config_file() -> Path:
    return config_dir() / "config.yaml"
