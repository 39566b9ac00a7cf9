from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence

from dfmon import console
from dfmon.collectors.usage import FilesystemStat
from dfmon.config import DfmonConfig


UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB")

# fixed tier between Low and the configurable thresholds
MEDIUM_FLOOR = 70.0

COLUMNS = ("Device", "Mount", "Type", "Total", "Used", "Free", "Usage")
_ROW_FMT = "{:<25} {:<25} {:<8} {:<10} {:<10} {:<10} {}"


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"

    @classmethod
    def parse(cls, name: str) -> "OutputFormat":
        """Unknown names fall back to TABLE."""
        try:
            return cls((name or "").strip().lower())
        except ValueError:
            return cls.TABLE


class UsageTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ColorScheme:
    low: str
    medium: str
    high: str
    critical: str
    reset: str

    def for_tier(self, tier: UsageTier) -> str:
        return {
            UsageTier.LOW: self.low,
            UsageTier.MEDIUM: self.medium,
            UsageTier.HIGH: self.high,
            UsageTier.CRITICAL: self.critical,
        }[tier]


COLORS = ColorScheme(
    low="\033[32m",
    medium="\033[33m",
    high="\033[31m",
    critical="\033[31;1m",
    reset="\033[0m",
)


def printable(name: str) -> str:
    """Names read from the mount table may carry undecodable bytes (surrogates)."""
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def fmt_bytes(b: int, human: bool) -> str:
    """Raw byte count, or binary units with one decimal (1536 -> '1.5 KiB')."""
    if not human:
        return str(b)
    if b < 1024:
        return f"{b} B"

    idx = 0
    while idx < len(UNITS) - 1 and b >= 1024 ** (idx + 1):
        idx += 1
    return f"{b / 1024 ** idx:.1f} {UNITS[idx]}"


def usage_tier(usage: float, warn: float, crit: float) -> UsageTier:
    """First match wins: crit, warn, then the fixed 70% floor."""
    if usage >= crit:
        return UsageTier.CRITICAL
    if usage >= warn:
        return UsageTier.HIGH
    if usage >= MEDIUM_FLOOR:
        return UsageTier.MEDIUM
    return UsageTier.LOW


def to_record(s: FilesystemStat) -> Dict[str, Any]:
    # wire order: free before used
    return {
        "device": printable(s.device),
        "mount": printable(s.mount_point),
        "type": printable(s.fs_type),
        "total": s.total_bytes,
        "free": s.free_bytes,
        "used": s.used_bytes,
        "usage": s.usage_percent,
    }


def render_table(stats: Sequence[FilesystemStat], cfg: DfmonConfig) -> str:
    lines: List[str] = [_ROW_FMT.format(*COLUMNS)]
    for s in stats:
        color = ""
        reset = ""
        if not cfg.no_color:
            color = COLORS.for_tier(usage_tier(s.usage_percent, cfg.warn_threshold, cfg.crit_threshold))
            reset = COLORS.reset
        lines.append(
            _ROW_FMT.format(
                printable(s.device),
                printable(s.mount_point),
                printable(s.fs_type),
                fmt_bytes(s.total_bytes, cfg.human_readable),
                fmt_bytes(s.used_bytes, cfg.human_readable),
                fmt_bytes(s.free_bytes, cfg.human_readable),
                f"{color}{s.usage_percent:.2f}%{reset}",
            )
        )
    return "\n".join(lines) + "\n"


def render_json(stats: Sequence[FilesystemStat]) -> str:
    try:
        return json.dumps([to_record(s) for s in stats], indent=2, ensure_ascii=False) + "\n"
    except (TypeError, ValueError) as e:
        console.log(f"JSON encoding error: {e}")
        return ""


def render_csv(stats: Sequence[FilesystemStat]) -> str:
    buf = io.StringIO()
    w = csv.writer(buf, lineterminator="\n")
    w.writerow(COLUMNS)
    for s in stats:
        w.writerow(
            [
                printable(s.device),
                printable(s.mount_point),
                printable(s.fs_type),
                s.total_bytes,
                s.used_bytes,
                s.free_bytes,
                f"{s.usage_percent:.2f}",
            ]
        )
    return buf.getvalue()


def render(stats: Sequence[FilesystemStat], cfg: DfmonConfig) -> str:
    fmt = OutputFormat.parse(cfg.output)
    if fmt is OutputFormat.JSON:
        return render_json(stats)
    if fmt is OutputFormat.CSV:
        return render_csv(stats)
    return render_table(stats, cfg)
