"""Go-style duration strings (``168h``, ``1h30m``, ``250ms``) to and from ``timedelta``."""

from __future__ import annotations

import re
from datetime import timedelta
from typing import Final

_UNIT_MICROSECONDS: Final[dict[str, float]] = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}

_COMPONENT_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"(?P<number>[0-9]*(?:\.[0-9]*)?)(?P<unit>[^0-9.]+)"
)


class DurationError(ValueError):
    """Raised when a duration string cannot be parsed."""


def parse_duration(raw: str) -> timedelta:
    """Parse a signed sequence of decimal numbers with unit suffixes.

    ``"0"`` is accepted without a unit; every other number needs one of
    ``ns``, ``us``, ``ms``, ``s``, ``m`` or ``h``.
    """

    text = raw.strip()
    original = text
    if not text:
        raise DurationError(f"invalid duration {original!r}")

    negative = False
    if text[0] in "+-":
        negative = text[0] == "-"
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise DurationError(f"invalid duration {original!r}")

    total = 0.0
    position = 0
    while position < len(text):
        match = _COMPONENT_PATTERN.match(text, position)
        if match is None:
            if text[position:].replace(".", "").isdigit():
                raise DurationError(f"missing unit in duration {original!r}")
            raise DurationError(f"invalid duration {original!r}")
        number = match.group("number")
        unit = match.group("unit")
        if number in {"", "."}:
            raise DurationError(f"invalid duration {original!r}")
        if unit not in _UNIT_MICROSECONDS:
            raise DurationError(f"unknown unit {unit!r} in duration {original!r}")
        total += float(number) * _UNIT_MICROSECONDS[unit]
        position = match.end()

    try:
        microseconds = round(total)
        return timedelta(microseconds=-microseconds if negative else microseconds)
    except (OverflowError, ValueError) as exc:
        raise DurationError(f"duration {original!r} out of range") from exc


def format_duration(value: timedelta) -> str:
    """Render ``value`` the way Go's ``time.Duration.String`` does (``1h0m0s``)."""

    micros = value // timedelta(microseconds=1)
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_decimal(micros, 1_000)}ms"

    whole_seconds, fraction = divmod(micros, 1_000_000)
    hours, remainder = divmod(whole_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    seconds_text = _decimal(seconds * 1_000_000 + fraction, 1_000_000)

    if hours:
        return f"{sign}{hours}h{minutes}m{seconds_text}s"
    if minutes:
        return f"{sign}{minutes}m{seconds_text}s"
    return f"{sign}{seconds_text}s"


def _decimal(value: int, scale: int) -> str:
    whole, fraction = divmod(value, scale)
    if not fraction:
        return str(whole)
    width = len(str(scale)) - 1
    return f"{whole}.{str(fraction).rjust(width, '0').rstrip('0')}"


__all__ = ["DurationError", "format_duration", "parse_duration"]
