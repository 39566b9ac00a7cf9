"""Tests for the usage analyzer."""

import errno
import math
import os

from conftest import FakeStatfn, fake_stat

from dfmon.cancel import CancelToken
from dfmon.collectors.mounts import MountEntry, read_mounts
from dfmon.collectors.usage import analyze, compute_usage


def _mounts(n):
    return [MountEntry(f"dev{i}", f"/m{i}", "ext4") for i in range(n)]


class TestComputeUsage:
    """Tests for compute_usage."""

    def test_derives_bytes_from_blocks(self):
        total, used, free, pct = compute_usage(fake_stat(blocks=100, avail=10, size=4096))

        assert total == 409600
        assert free == 40960
        assert used == total - free
        assert pct == 90.0

    def test_zero_capacity_is_zero_percent(self):
        total, used, free, pct = compute_usage(fake_stat(blocks=0, avail=0))

        assert (total, used, free) == (0, 0, 0)
        assert pct == 0
        assert not math.isnan(pct)

    def test_falls_back_to_bsize(self):
        st = fake_stat(blocks=10, avail=5, size=512)._replace(f_frsize=0)

        total, _, free, _ = compute_usage(st)

        assert total == 5120
        assert free == 2560


class TestAnalyze:
    """Tests for analyze."""

    def test_one_stat_per_mount_in_order(self):
        statfn = FakeStatfn({"/m0": fake_stat(100, 50), "/m1": fake_stat(100, 25)})

        stats = analyze(_mounts(2), statfn=statfn)

        assert [s.mount_point for s in stats] == ["/m0", "/m1"]
        assert [s.usage_percent for s in stats] == [50.0, 75.0]
        assert stats[0].device == "dev0"
        assert stats[0].fs_type == "ext4"

    def test_failed_stat_is_skipped(self, capsys):
        """One bad mount never aborts the scan."""
        statfn = FakeStatfn(
            {
                "/m0": fake_stat(100, 50),
                "/m1": OSError(errno.ESTALE, "Stale file handle"),
                "/m2": fake_stat(100, 10),
            }
        )

        stats = analyze(_mounts(3), statfn=statfn)

        assert [s.mount_point for s in stats] == ["/m0", "/m2"]
        err = capsys.readouterr().err
        assert "Warning: cannot stat /m1" in err

    def test_cancel_before_start_returns_nothing(self, capsys):
        token = CancelToken()
        token.cancel()
        statfn = FakeStatfn({})

        assert analyze(_mounts(3), cancel=token, statfn=statfn) == []
        assert statfn.calls == []
        assert "Analysis cancelled" in capsys.readouterr().err

    def test_cancel_mid_scan_keeps_partial_results(self):
        """Cancelling after N of M mounts yields exactly N stats."""
        token = CancelToken()
        results = {f"/m{i}": fake_stat(100, 50) for i in range(5)}

        def statfn(path):
            if path == "/m2":
                token.cancel()
            return results[path]

        stats = analyze(_mounts(5), cancel=token, statfn=statfn)

        assert [s.mount_point for s in stats] == ["/m0", "/m1", "/m2"]

    def test_progress_every_ten_mounts(self, capsys):
        statfn = FakeStatfn({f"/m{i}": fake_stat(10, 5) for i in range(21)})

        stats = analyze(_mounts(21), statfn=statfn)

        err = capsys.readouterr().err
        assert len(stats) == 21
        assert "Processing 0/21 mounts..." in err
        assert "Processing 10/21 mounts..." in err
        assert "Processing 20/21 mounts..." in err
        assert err.count("Processing") == 3

    def test_empty_input(self):
        assert analyze([], statfn=FakeStatfn({})) == []


class TestUndecodableMountPoints:
    """Mount points that are not valid UTF-8 still reach statvfs intact."""

    def test_non_utf8_directory_is_stated(self, tmp_path):
        raw_dir = os.fsencode(str(tmp_path)) + b"/caf\xe9"
        os.mkdir(raw_dir)
        table = tmp_path / "mounts"
        table.write_bytes(b"/dev/x " + raw_dir + b" ext4 rw 0 0\n")

        stats = analyze(read_mounts(table))

        assert len(stats) == 1
        assert os.fsencode(stats[0].mount_point) == raw_dir
        assert stats[0].total_bytes > 0
