"""Scaling and formatting of profile sample values with units."""

from __future__ import annotations

__all__ = [
    "scale",
    "label",
    "scaled_label",
    "percentage",
    "is_memory_unit",
    "is_time_unit",
]

_KIB = 1024

_MEMORY_FROM_FACTORS = {
    "byte": 1,
    "b": 1,
    "kb": _KIB,
    "kbyte": _KIB,
    "kilobyte": _KIB,
    "mb": _KIB**2,
    "mbyte": _KIB**2,
    "megabyte": _KIB**2,
    "gb": _KIB**3,
    "gbyte": _KIB**3,
    "gigabyte": _KIB**3,
    "tb": _KIB**4,
    "tbyte": _KIB**4,
    "terabyte": _KIB**4,
    "pb": _KIB**5,
    "pbyte": _KIB**5,
    "petabyte": _KIB**5,
}

# Target memory unit -> (divisor, display unit).
_MEMORY_TO = {
    "kb": (_KIB, "kB"),
    "kbyte": (_KIB, "kB"),
    "kilobyte": (_KIB, "kB"),
    "mb": (_KIB**2, "MB"),
    "mbyte": (_KIB**2, "MB"),
    "megabyte": (_KIB**2, "MB"),
    "gb": (_KIB**3, "GB"),
    "gbyte": (_KIB**3, "GB"),
    "gigabyte": (_KIB**3, "GB"),
    "tb": (_KIB**4, "TB"),
    "tbyte": (_KIB**4, "TB"),
    "terabyte": (_KIB**4, "TB"),
    "pb": (_KIB**5, "PB"),
    "pbyte": (_KIB**5, "PB"),
    "petabyte": (_KIB**5, "PB"),
}

_MEMORY_AUTO = [
    (_KIB, "b"),
    (_KIB**2, "kb"),
    (_KIB**3, "mb"),
    (_KIB**4, "gb"),
    (_KIB**5, "tb"),
]

_NS = 1
_US = 1_000
_MS = 1_000_000
_SEC = 1_000_000_000
_MIN = 60 * _SEC
_HOUR = 60 * _MIN
_DAY = 24 * _HOUR

_TIME_FROM_FACTORS = {
    "nanosecond": _NS,
    "ns": _NS,
    "microsecond": _US,
    "millisecond": _MS,
    "ms": _MS,
    "second": _SEC,
    "sec": _SEC,
    "s": _SEC,
}

# Target time unit -> (duration in nanoseconds, display unit).
_TIME_TO = {
    "ns": (_NS, "ns"),
    "nanosecond": (_NS, "ns"),
    "us": (_US, "us"),
    "microsecond": (_US, "us"),
    "ms": (_MS, "ms"),
    "millisecond": (_MS, "ms"),
    "min": (_MIN, "mins"),
    "minute": (_MIN, "mins"),
    "hour": (_HOUR, "hrs"),
    "hr": (_HOUR, "hrs"),
    "day": (_DAY, "days"),
    "week": (7 * _DAY, "wks"),
    "wk": (7 * _DAY, "wks"),
    "year": (365 * _DAY, "yrs"),
    "yr": (365 * _DAY, "yrs"),
}

_TIME_AUTO = [
    (_US, "ns"),
    (_MS, "us"),
    (_SEC, "ms"),
    (_MIN, "sec"),
    (_HOUR, "min"),
    (_DAY, "hour"),
    (15 * _DAY, "day"),
    (120 * _DAY, "week"),
]

_UNINTERESTING_UNITS = frozenset({"count", "sample", "unit", "minimum", "auto"})

_MEMORY_UNITS = frozenset(
    {"byte", "b", "kilobyte", "kb", "megabyte", "mb", "gigabyte", "gb"}
)

_TIME_UNITS = frozenset(
    {
        "nanosecond",
        "ns",
        "microsecond",
        "millisecond",
        "ms",
        "s",
        "second",
        "sec",
        "hr",
        "day",
        "week",
        "year",
    }
)


def _normalize_memory_unit(unit: str) -> str:
    return unit.lower().removesuffix("s")


def _normalize_time_unit(unit: str) -> str:
    unit = unit.lower()
    if len(unit) > 2:
        unit = unit.removesuffix("s")
    return unit


def is_memory_unit(unit: str) -> bool:
    """Return whether ``unit`` names a memory size unit."""
    return _normalize_memory_unit(unit) in _MEMORY_UNITS


def is_time_unit(unit: str) -> bool:
    """Return whether ``unit`` names a time unit."""
    return _normalize_time_unit(unit) in _TIME_UNITS


def _memory_label(value: int, from_unit: str, to_unit: str) -> tuple[float, str] | None:
    factor = _MEMORY_FROM_FACTORS.get(_normalize_memory_unit(from_unit))
    if factor is None:
        return None
    value *= factor
    to_unit = _normalize_memory_unit(to_unit)

    if to_unit in ("minimum", "auto"):
        to_unit = next(
            (name for limit, name in _MEMORY_AUTO if value < limit), "pb"
        )

    divisor, display = _MEMORY_TO.get(to_unit, (1, "B"))
    return value / divisor, display


def _time_label(value: int, from_unit: str, to_unit: str) -> tuple[float, str] | None:
    from_unit = _normalize_time_unit(from_unit)
    to_unit = _normalize_time_unit(to_unit)

    if from_unit == "cycle":
        return float(value), ""
    factor = _TIME_FROM_FACTORS.get(from_unit)
    if factor is None:
        return None
    duration = value * factor

    if to_unit in ("minimum", "auto"):
        to_unit = next(
            (name for limit, name in _TIME_AUTO if duration < limit), "year"
        )

    # "sec", "second" and "s" fall through to the default of seconds.
    divisor, display = _TIME_TO.get(to_unit, (_SEC, "s"))
    return duration / divisor, display


def scale(value: int, from_unit: str, to_unit: str) -> tuple[float, str]:
    """Scale ``value`` from ``from_unit`` to ``to_unit``.

    Returns the scaled value and the display unit; the unit is empty when
    it carries no interesting information.
    """
    if value < 0:
        scaled, unit = scale(-value, from_unit, to_unit)
        return -scaled, unit
    result = _memory_label(value, from_unit, to_unit)
    if result is not None:
        return result
    result = _time_label(value, from_unit, to_unit)
    if result is not None:
        return result
    if to_unit in _UNINTERESTING_UNITS:
        return float(value), ""
    return float(value), to_unit


def scaled_label(value: int, from_unit: str, to_unit: str) -> str:
    """Scale a measurement and format it as a label."""
    scaled, unit = scale(value, from_unit, to_unit)
    text = f"{scaled:.2f}".removesuffix(".00")
    if text in ("0", "-0"):
        return "0"
    return text + unit


def label(value: int, unit: str) -> str:
    """Return a label describing ``value`` in the most readable unit."""
    return scaled_label(value, unit, "auto")


def percentage(value: int, total: int) -> str:
    """Format ``value`` as a percentage of ``total`` with two digits of precision."""
    ratio = abs(value / total) * 100 if total != 0 else 0.0
    if 99.95 <= ratio <= 100.05:
        return "  100%"
    if ratio >= 1.0:
        return f"{ratio:5.2f}%"
    return f"{ratio:5.2g}%"