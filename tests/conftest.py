"""Shared test fixtures."""

from collections import namedtuple
from typing import Dict, Union

import pytest

from dfmon import paths


FakeStatvfs = namedtuple("FakeStatvfs", ["f_bsize", "f_frsize", "f_blocks", "f_bavail"])


def fake_stat(blocks: int, avail: int, size: int = 4096) -> FakeStatvfs:
    return FakeStatvfs(f_bsize=size, f_frsize=size, f_blocks=blocks, f_bavail=avail)


class FakeStatfn:
    """statvfs stand-in: path -> FakeStatvfs, or an OSError to raise."""

    def __init__(self, results: Dict[str, Union[FakeStatvfs, OSError]]):
        self.results = results
        self.calls = []

    def __call__(self, path: str) -> FakeStatvfs:
        self.calls.append(path)
        res = self.results[path]
        if isinstance(res, OSError):
            raise res
        return res


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """No real config file or env thresholds leak into tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("DFMON_WARN", raising=False)
    monkeypatch.delenv("DFMON_CRIT", raising=False)


@pytest.fixture
def mount_table(tmp_path, monkeypatch):
    """Write a fake /proc/mounts and point dfmon at it."""

    def _write(text: str):
        p = tmp_path / "mounts"
        p.write_text(text, encoding="utf-8")
        monkeypatch.setattr(paths, "MOUNTS_FILE", str(p))
        return p

    return _write
