"""Duration settings: "500ms", "2s", "1m30s", ISO-8601 "PT0.5S", or plain seconds."""

import re
from typing import Union

_NUMBER = r"\d+(?:\.\d+)?"
_UNIT_SECONDS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}
_HUMAN_PART = re.compile(rf"({_NUMBER})(ms|s|m|h)")
_HUMAN = re.compile(rf"(?:{_NUMBER}(?:ms|s|m|h))+")
_ISO = re.compile(rf"PT(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>{_NUMBER})S)?")


class DurationParseError(ValueError):
    """A duration setting that cannot be turned into seconds."""


def parse_duration(duration: Union[str, int, float], allow_zero: bool = False) -> float:
    """
    Convert a duration setting to seconds.

    Args:
        duration: Number of seconds, or a string such as "500ms", "2s",
            "1m30s", "PT2S", "PT0.5S"
        allow_zero: Accept 0 (for switches such as the debounce)

    Returns:
        Duration in seconds

    Raises:
        DurationParseError: If the value is malformed, negative, or zero
            without allow_zero

    Examples:
        >>> parse_duration("500ms")
        0.5
        >>> parse_duration("PT1M30S")
        90.0
    """
    if isinstance(duration, bool):
        raise DurationParseError(f"Invalid duration: {duration!r}")

    if isinstance(duration, (int, float)):
        seconds = float(duration)
    else:
        seconds = _parse_text(str(duration))

    if seconds < 0:
        raise DurationParseError(f"Duration cannot be negative: {duration!r}")
    if seconds == 0 and not allow_zero:
        raise DurationParseError(f"Duration cannot be zero: {duration!r}")
    return seconds


def _parse_text(text: str) -> float:
    compact = re.sub(r"\s+", "", text).lower()
    if not compact:
        raise DurationParseError("Duration cannot be empty")

    if re.fullmatch(_NUMBER, compact):
        return float(compact)

    if compact.startswith("p"):
        match = _ISO.fullmatch(compact.upper())
        if match is None or not any(match.groupdict().values()):
            raise DurationParseError(
                f"Invalid ISO-8601 duration: {text!r} (expected e.g. PT2S, PT0.5S, PT1M)"
            )
        return (
            int(match["hours"] or 0) * 3600
            + int(match["minutes"] or 0) * 60
            + float(match["seconds"] or 0)
        )

    if not _HUMAN.fullmatch(compact):
        raise DurationParseError(
            f"Invalid duration: {text!r} (expected e.g. 500ms, 2s, 1m or 1m30s)"
        )
    return sum(float(value) * _UNIT_SECONDS[unit] for value, unit in _HUMAN_PART.findall(compact))


def validate_duration_range(
    duration_seconds: float,
    min_seconds: float = 0.1,
    max_seconds: float = 3600,
    name: str = "Duration",
) -> None:
    """Raise DurationParseError unless min_seconds <= duration_seconds <= max_seconds."""
    if duration_seconds < min_seconds:
        problem = f"too short: {_seconds_to_human_readable(duration_seconds)}"
        limit = f"Minimum is {_seconds_to_human_readable(min_seconds)}"
    elif duration_seconds > max_seconds:
        problem = f"too long: {_seconds_to_human_readable(duration_seconds)}"
        limit = f"Maximum is {_seconds_to_human_readable(max_seconds)}"
    else:
        return
    raise DurationParseError(f"{name} {problem}. {limit}.")


def _seconds_to_human_readable(seconds: float) -> str:
    """E.g. 0.05 -> "50 milliseconds", 2 -> "2 seconds", 3600 -> "1 hour"."""
    if seconds < 1:
        value, unit = int(round(seconds * 1000)), "millisecond"
    elif seconds < 60:
        value = int(seconds) if float(seconds).is_integer() else round(seconds, 2)
        unit = "second"
    elif seconds < 3600:
        value, unit = int(seconds // 60), "minute"
    else:
        value, unit = int(seconds // 3600), "hour"
    return f"{value} {unit}{'' if value == 1 else 's'}"
