"""
ETA derivation for progress display.

Dependencies: apply_progress.core.time_format, apply_progress.models
System role: Elapsed/remaining time strings shown next to the progress bar
"""

import math

from apply_progress.core.time_format import format_time
from apply_progress.models.progress import ProgressSnapshot


def estimate_remaining(snapshot: ProgressSnapshot) -> str | None:
    """
    Remaining-time string for a run, or None when nothing should be shown.

    Server-formatted text wins; positive raw seconds are formatted locally.
    Finished runs never show an estimate.
    """
    if snapshot.is_terminal or snapshot.time is None:
        return None
    timing = snapshot.time
    if timing.estimated_remaining_formatted:
        return timing.estimated_remaining_formatted
    seconds = timing.estimated_remaining_seconds
    if seconds is not None and math.isfinite(seconds) and seconds > 0:
        return format_time(int(seconds))
    return None


def elapsed_display(snapshot: ProgressSnapshot | None, local_elapsed: int) -> str:
    """Server elapsed text when provided, else the local wall-clock elapsed."""
    if snapshot is not None and snapshot.time is not None and snapshot.time.elapsed_formatted:
        return snapshot.time.elapsed_formatted
    return format_time(local_elapsed)
