"""
Time formatting and parsing helpers.

Playback positions are floats in seconds. Display uses H:MM:SS and
clip filenames use H-MM-SS so they stay filesystem safe.
"""

import math


def _split(seconds: float) -> tuple[int, int, int]:
    total = int(max(0.0, seconds))
    return total // 3600, (total % 3600) // 60, total % 60


def format_time(seconds: float) -> str:
    """
    Format seconds for display.

    Args:
        seconds: Position in seconds (negative clamps to zero)

    Returns:
        "H:MM:SS" string
    """
    hours, minutes, secs = _split(seconds)
    return f"{hours}:{minutes:02d}:{secs:02d}"


def format_timestamp(seconds: float) -> str:
    """
    Format seconds as H-MM-SS for use in file names.

    Args:
        seconds: Position in seconds

    Returns:
        Timestamp with dashes instead of colons
    """
    hours, minutes, secs = _split(seconds)
    return f"{hours}-{minutes:02d}-{secs:02d}"


def parse_time_to_seconds(value: str) -> float:
    """
    Parse a user supplied time.

    Accepts H:MM:SS, MM:SS or plain seconds (integer or decimal).

    Args:
        value: Time string

    Returns:
        Seconds as float

    Raises:
        ValueError: If the string is not a recognised, finite, non-negative time
    """
    text = value.strip()
    if not text:
        raise ValueError("empty time value")

    parts = text.split(":")
    if len(parts) > 3:
        raise ValueError(f"invalid time format: {value}")

    try:
        numbers = [float(p) for p in parts]
    except ValueError as e:
        raise ValueError(f"invalid time format: {value}") from e

    if any(not math.isfinite(n) or n < 0 for n in numbers):
        raise ValueError(f"invalid time format: {value}")

    if len(numbers) == 1:
        return numbers[0]
    if len(numbers) == 2:
        minutes, secs = numbers
        return minutes * 60 + secs
    hours, minutes, secs = numbers
    return hours * 3600 + minutes * 60 + secs
