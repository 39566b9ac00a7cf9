from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Optional, Tuple

from dfmon import console
from dfmon.cancel import CancelToken
from dfmon.collectors.mounts import MountEntry


PROGRESS_EVERY = 10


@dataclass(frozen=True)
class FilesystemStat:
    device: str
    mount_point: str
    fs_type: str
    total_bytes: int
    used_bytes: int
    free_bytes: int
    usage_percent: float


def _statvfs(path: str) -> Any:
    return os.statvfs(path)


def compute_usage(st: Any) -> Tuple[int, int, int, float]:
    """
    (total, used, free, pct) from a statvfs result.
    free counts blocks available to non-root callers (f_bavail), like df.
    """
    size = int(st.f_frsize) or int(st.f_bsize)
    total = int(st.f_blocks) * size
    free = int(st.f_bavail) * size
    used = max(0, total - free)
    pct = (used / total) * 100 if total > 0 else 0.0
    return total, used, free, pct


def analyze(
    mounts: Iterable[MountEntry],
    cancel: Optional[CancelToken] = None,
    statfn: Optional[Callable[[str], Any]] = None,
) -> List[FilesystemStat]:
    """
    Stat every mount in order.

    - cancel: checked before each mount; when set, returns what was collected so far
    - statfn: statvfs-like callable (default: os.statvfs)

    A mount whose stat fails is skipped with a warning.
    """
    stat = statfn or _statvfs
    items = list(mounts)
    out: List[FilesystemStat] = []

    for i, m in enumerate(items):
        if cancel is not None and cancel.cancelled:
            console.log("Analysis cancelled")
            return out

        if i % PROGRESS_EVERY == 0:
            console.log(f"Processing {i}/{len(items)} mounts...")

        try:
            st = stat(m.mount_point)
        except OSError as e:
            console.log(f"Warning: cannot stat {m.mount_point}: {e}")
            continue

        total, used, free, pct = compute_usage(st)
        out.append(
            FilesystemStat(
                device=m.device,
                mount_point=m.mount_point,
                fs_type=m.fs_type,
                total_bytes=total,
                used_bytes=used,
                free_bytes=free,
                usage_percent=pct,
            )
        )

    return out
