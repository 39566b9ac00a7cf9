from __future__ import annotations

from enum import Enum
from typing import Iterable, List

from dfmon.collectors.usage import FilesystemStat


class SortKey(str, Enum):
    MOUNT = "mount"
    USAGE = "usage"
    SIZE = "size"

    @classmethod
    def parse(cls, name: str) -> "SortKey":
        """Unknown names fall back to MOUNT."""
        try:
            return cls((name or "").strip().lower())
        except ValueError:
            return cls.MOUNT


def sort_stats(stats: Iterable[FilesystemStat], key: SortKey) -> List[FilesystemStat]:
    """Stable sort: ties keep input order."""
    if key is SortKey.USAGE:
        return sorted(stats, key=lambda s: s.usage_percent, reverse=True)
    if key is SortKey.SIZE:
        return sorted(stats, key=lambda s: s.total_bytes, reverse=True)
    return sorted(stats, key=lambda s: s.mount_point)
