"""Upload progress reporting helpers."""

from __future__ import annotations

import time
from typing import BinaryIO, Callable

ProgressCallback = Callable[[int, int], None]
BatchProgressCallback = Callable[[int, int, str], None]
MonitorCallback = Callable[[int, int, float, float, str], None]

_BYTE_UNITS = "KMGTPE"


class ProgressReader:
    """Wrap a binary stream and report cumulative bytes after every read."""

    def __init__(self, stream: BinaryIO, total: int, callback: ProgressCallback) -> None:
        self._stream = stream
        self._callback = callback
        self.total = total
        self.bytes_read = 0

    def read(self, size: int = -1) -> bytes:
        chunk = self._stream.read(size)
        self.bytes_read += len(chunk)
        self._callback(self.bytes_read, self.total)
        return chunk


def format_bytes(num_bytes: int) -> str:
    if num_bytes < 1024:
        return f"{num_bytes} B"
    div, exp = 1024, 0
    n = num_bytes // 1024
    while n >= 1024:
        div *= 1024
        exp += 1
        n //= 1024
    return f"{num_bytes / div:.1f} {_BYTE_UNITS[exp]}B"


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3600:
        return f"{seconds / 60:.1f}m"
    return f"{seconds / 3600:.1f}h"


def create_progress_bar(percentage: int, width: int) -> str:
    percentage = max(0, min(100, percentage))
    filled = percentage * width // 100
    return "[" + "█" * filled + "░" * (width - filled) + "]"


class ProgressMonitor:
    """Turn raw ``(uploaded, total)`` updates into percentage, speed and ETA.

    Pass ``monitor.on_progress`` as the ``on_progress`` argument of an upload.
    Speed is reported in KB/s, measured between consecutive updates. Without
    a callback the monitor redraws a single progress line on stdout.
    """

    def __init__(
        self,
        callback: MonitorCallback | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._callback = callback
        self._clock = clock
        self._start_time = clock()
        self._last_time: float | None = None
        self._last_uploaded = 0

    def on_progress(self, uploaded: int, total: int) -> None:
        now = self._clock()
        percentage = uploaded / total * 100 if total > 0 else 0.0

        speed = 0.0
        if self._last_time is not None:
            elapsed = now - self._last_time
            if elapsed > 0:
                speed = (uploaded - self._last_uploaded) / elapsed / 1024

        if speed > 0 and uploaded > 0:
            remaining_seconds = (total - uploaded) / (speed * 1024)
            eta = format_duration(int(remaining_seconds))
        else:
            eta = "Calculating..."

        if self._callback is not None:
            self._callback(uploaded, total, percentage, speed, eta)
        else:
            self._render(uploaded, total, percentage, speed, eta)

        self._last_time = now
        self._last_uploaded = uploaded

    @property
    def total_duration(self) -> float:
        return self._clock() - self._start_time

    @staticmethod
    def _render(uploaded: int, total: int, percentage: float, speed: float, eta: str) -> None:
        bar = create_progress_bar(int(percentage), 50)
        print(
            f"\r{bar} {percentage:.1f}% ({format_bytes(uploaded)}/{format_bytes(total)}) "
            f"{speed:.1f} KB/s ETA: {eta}",
            end="",
            flush=True,
        )
