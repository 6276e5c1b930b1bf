from datetime import timedelta

import pytest

from lingstorage.common.durations import format_go_duration


@pytest.mark.parametrize(
    ("delta", "expected"),
    [
        (timedelta(hours=1), "1h0m0s"),
        (timedelta(hours=24), "24h0m0s"),
        (timedelta(minutes=30), "30m0s"),
        (timedelta(minutes=1, seconds=30), "1m30s"),
        (timedelta(hours=2, minutes=5, seconds=7), "2h5m7s"),
        (timedelta(seconds=45), "45s"),
        (timedelta(seconds=1.5), "1.5s"),
        (timedelta(milliseconds=500), "500ms"),
        (timedelta(microseconds=1500), "1.5ms"),
        (timedelta(microseconds=20), "20µs"),
        (timedelta(0), "0s"),
        (timedelta(seconds=-90), "-1m30s"),
    ],
)
def test_format_go_duration(delta, expected):
    assert format_go_duration(delta) == expected
