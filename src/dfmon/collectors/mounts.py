from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from dfmon import paths
from dfmon.errors import MountReadError, MountTableMissing


DEFAULT_EXCLUDE = "proc,sysfs,devtmpfs,tmpfs,cgroup,devpts"

# /proc/mounts escapes space, tab, newline and backslash as \ooo
_OCTAL_RE = re.compile(r"\\([0-7]{3})")


@dataclass(frozen=True)
class MountEntry:
    device: str
    mount_point: str
    fs_type: str


def _unescape(field: str) -> str:
    return _OCTAL_RE.sub(lambda m: chr(int(m.group(1), 8)), field)


def parse_mounts(text: str) -> List[MountEntry]:
    """
    Parse mount-table text (fstab format).
    Lines with fewer than 3 fields are dropped without notice.
    """
    out: List[MountEntry] = []
    for line in text.splitlines():
        parts = line.split()
        if len(parts) < 3:
            continue
        out.append(
            MountEntry(
                device=_unescape(parts[0]),
                mount_point=_unescape(parts[1]),
                fs_type=parts[2],
            )
        )
    return out


def ensure_mount_table(path: Optional[Union[str, Path]] = None) -> Path:
    p = Path(path) if path is not None else paths.mounts_file()
    if not p.exists():
        raise MountTableMissing(f"Linux only: {p} not found")
    return p


def read_mounts(path: Optional[Union[str, Path]] = None) -> List[MountEntry]:
    p = Path(path) if path is not None else paths.mounts_file()
    try:
        # undecodable bytes survive as surrogates, os.statvfs re-encodes them
        text = p.read_text(encoding="utf-8", errors="surrogateescape")
    except OSError as e:
        raise MountReadError(f"Failed to read mounts: {e}") from e
    return parse_mounts(text)


def parse_exclude(value: str) -> List[str]:
    return [s.strip() for s in (value or "").split(",")]


def filter_mounts(
    mounts: Iterable[MountEntry],
    exclude: Union[str, Iterable[str]],
) -> List[MountEntry]:
    """Drop entries whose fs type is excluded. Empty names never match."""
    names = parse_exclude(exclude) if isinstance(exclude, str) else list(exclude)
    excluded = {n for n in names if n}
    return [m for m in mounts if m.fs_type not in excluded]
