"""Render ``timedelta`` values in the server's duration notation.

The LingStorage API parses durations such as ``1h0m0s``, ``1m30s``,
``1.5s`` or ``500ms``: hours and minutes are integers, the smallest unit
carries a trimmed decimal fraction.
"""

from __future__ import annotations

from datetime import timedelta

_MICROS_PER_SECOND = 1_000_000
_MICROS_PER_MILLI = 1_000


def _with_fraction(value: int, unit: int) -> str:
    whole, rest = divmod(value, unit)
    if not rest:
        return str(whole)
    digits = len(str(unit)) - 1
    return f"{whole}.{rest:0{digits}d}".rstrip("0")


def format_go_duration(delta: timedelta) -> str:
    micros = (delta.days * 86400 + delta.seconds) * _MICROS_PER_SECOND + delta.microseconds
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < _MICROS_PER_SECOND:
        if micros < _MICROS_PER_MILLI:
            return f"{sign}{micros}µs"
        return f"{sign}{_with_fraction(micros, _MICROS_PER_MILLI)}ms"

    total_seconds, fraction = divmod(micros, _MICROS_PER_SECOND)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    text = _with_fraction(seconds * _MICROS_PER_SECOND + fraction, _MICROS_PER_SECOND) + "s"
    if hours:
        text = f"{hours}h{minutes}m{text}"
    elif minutes:
        text = f"{minutes}m{text}"
    return sign + text
