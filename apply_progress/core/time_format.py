"""
Human-readable duration formatting for run progress.

Dependencies: None
System role: Elapsed/remaining time display strings
"""


def _unit(value: int, name: str) -> str:
    return f"{value} {name}{'' if value == 1 else 's'}"


def format_time(seconds: float) -> str:
    """
    Format a duration in whole seconds.

    Under a minute shows seconds, under an hour shows minutes with the
    remainder seconds when non-zero, otherwise hours and minutes.

    Args:
        seconds: Duration in seconds (floored to an int)

    Returns:
        str: e.g. "5 secs", "1 min 5 secs", "1 hr 0 mins"

    Raises:
        ValueError: If seconds is negative
    """
    if seconds < 0:
        raise ValueError(f"seconds must be >= 0, got {seconds}")
    s = int(seconds)

    if s < 60:
        return _unit(s, "sec")
    if s < 3600:
        minutes, secs = divmod(s, 60)
        if secs == 0:
            return _unit(minutes, "min")
        return f"{_unit(minutes, 'min')} {_unit(secs, 'sec')}"

    hours, rest = divmod(s, 3600)
    return f"{_unit(hours, 'hr')} {_unit(rest // 60, 'min')}"
