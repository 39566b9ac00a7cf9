from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from dfmon import paths
from dfmon.collectors.mounts import DEFAULT_EXCLUDE
from dfmon.errors import ConfigError


@dataclass(frozen=True)
class DfmonConfig:
    # -a: parsed, not used by any filter yet
    show_all: bool = False
    human_readable: bool = True
    output: str = "table"
    sort: str = "mount"
    exclude: str = DEFAULT_EXCLUDE

    warn_threshold: float = 70.0
    crit_threshold: float = 90.0

    no_color: bool = False


DEFAULT_CONFIG = DfmonConfig()


def to_dict(cfg: DfmonConfig) -> Dict[str, Any]:
    return {
        "show_all": cfg.show_all,
        "human_readable": cfg.human_readable,
        "output": cfg.output,
        "sort": cfg.sort,
        "exclude": cfg.exclude,
        "thresholds": {
            "warn": cfg.warn_threshold,
            "crit": cfg.crit_threshold,
        },
        "color": not cfg.no_color,
    }


def dump_config(cfg: DfmonConfig = DEFAULT_CONFIG) -> str:
    return yaml.safe_dump(to_dict(cfg), sort_keys=False)


def _bool(raw: Dict[str, Any], key: str, default: bool) -> bool:
    v = raw.get(key, default)
    if not isinstance(v, bool):
        raise ConfigError(f"'{key}' must be true or false, got {v!r}")
    return v


def _str(raw: Dict[str, Any], key: str, default: str) -> str:
    v = raw.get(key, default)
    if not isinstance(v, str):
        raise ConfigError(f"'{key}' must be a string, got {v!r}")
    return v


def _number(raw: Dict[str, Any], key: str, default: float) -> float:
    v = raw.get(key, default)
    # bool is an int subclass
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ConfigError(f"threshold '{key}' must be a number, got {v!r}")
    return float(v)


def _exclude(raw: Dict[str, Any], default: str) -> str:
    v = raw.get("exclude", default)
    if v is None:
        return ""
    if isinstance(v, str):
        return v
    if isinstance(v, list) and all(isinstance(x, str) for x in v):
        return ",".join(v)
    raise ConfigError(f"'exclude' must be a string or a list of strings, got {v!r}")


def from_dict(raw: Dict[str, Any]) -> DfmonConfig:
    d = DEFAULT_CONFIG
    thresholds = raw.get("thresholds", {}) or {}
    if not isinstance(thresholds, dict):
        raise ConfigError("'thresholds' must be a mapping")

    return DfmonConfig(
        show_all=_bool(raw, "show_all", d.show_all),
        human_readable=_bool(raw, "human_readable", d.human_readable),
        output=_str(raw, "output", d.output),
        sort=_str(raw, "sort", d.sort),
        exclude=_exclude(raw, d.exclude),
        warn_threshold=_number(thresholds, "warn", d.warn_threshold),
        crit_threshold=_number(thresholds, "crit", d.crit_threshold),
        no_color=not _bool(raw, "color", not d.no_color),
    )


def _env_overrides(cfg: DfmonConfig) -> DfmonConfig:
    # env overrides (handy in cron jobs and quick tests)
    try:
        warn = float(os.getenv("DFMON_WARN", str(cfg.warn_threshold)))
        crit = float(os.getenv("DFMON_CRIT", str(cfg.crit_threshold)))
    except ValueError as e:
        raise ConfigError(f"invalid DFMON_WARN/DFMON_CRIT: {e}") from e
    return replace(cfg, warn_threshold=warn, crit_threshold=crit)


def load_config(path: Optional[Union[str, Path]] = None) -> DfmonConfig:
    """Load config.yaml (if any) and fall back to defaults. The file is never created."""
    p = Path(path) if path is not None else paths.config_file()
    if not p.exists():
        return _env_overrides(DEFAULT_CONFIG)

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot load {p}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{p}: top level must be a mapping")

    return _env_overrides(from_dict(raw))


def apply_overrides(cfg: DfmonConfig, **overrides: Any) -> DfmonConfig:
    """Replace fields with the CLI values that were actually given (None = not given)."""
    given = {k: v for k, v in overrides.items() if v is not None}
    return replace(cfg, **given)
