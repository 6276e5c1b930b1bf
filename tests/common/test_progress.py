import io
from unittest.mock import MagicMock

import pytest

from lingstorage.common.progress import (
    ProgressMonitor,
    ProgressReader,
    create_progress_bar,
    format_bytes,
    format_duration,
)


class TestProgressReader:
    def test_reports_cumulative_bytes(self):
        callback = MagicMock()
        reader = ProgressReader(io.BytesIO(b"abcdefgh"), 8, callback)

        assert reader.read(3) == b"abc"
        assert reader.read(10) == b"defgh"
        assert reader.read(10) == b""

        assert [c.args for c in callback.call_args_list] == [(3, 8), (8, 8), (8, 8)]
        assert reader.bytes_read == 8


@pytest.mark.parametrize(
    ("num_bytes", "expected"),
    [
        (0, "0 B"),
        (1023, "1023 B"),
        (1024, "1.0 KB"),
        (1536, "1.5 KB"),
        (5 * 1024 * 1024, "5.0 MB"),
        (3 * 1024**3, "3.0 GB"),
    ],
)
def test_format_bytes(num_bytes, expected):
    assert format_bytes(num_bytes) == expected


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [
        (0.25, "250ms"),
        (1.5, "1.5s"),
        (90, "1.5m"),
        (5400, "1.5h"),
    ],
)
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_create_progress_bar():
    assert create_progress_bar(50, 10) == "[█████░░░░░]"
    assert create_progress_bar(0, 4) == "[░░░░]"
    assert create_progress_bar(100, 4) == "[████]"


class TestProgressMonitor:
    def test_speed_and_eta(self):
        ticks = iter([0.0, 1.0, 2.0])
        callback = MagicMock()
        monitor = ProgressMonitor(callback, clock=lambda: next(ticks))

        monitor.on_progress(1024, 4096)
        monitor.on_progress(2048, 4096)

        first, second = (c.args for c in callback.call_args_list)
        assert first == (1024, 4096, 25.0, 0.0, "Calculating...")
        uploaded, total, percentage, speed, eta = second
        assert (uploaded, total, percentage) == (2048, 4096, 50.0)
        assert speed == pytest.approx(1.0)
        assert eta == "2.0s"

    def test_renders_to_stdout_without_callback(self, capsys):
        monitor = ProgressMonitor(clock=lambda: 0.0)

        monitor.on_progress(512, 1024)

        out = capsys.readouterr().out
        assert out.startswith("\r[")
        assert "50.0%" in out
        assert "(512 B/1.0 KB)" in out
        assert "ETA: Calculating..." in out

    def test_total_duration(self):
        ticks = iter([10.0, 12.5])
        monitor = ProgressMonitor(MagicMock(), clock=lambda: next(ticks))

        assert monitor.total_duration == 2.5
