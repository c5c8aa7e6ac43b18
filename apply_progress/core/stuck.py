"""
Advisory heuristics evaluated on every render.

Dependencies: apply_progress.models
System role: "Taking longer than expected" and daily-limit notices
"""

from apply_progress.models.progress import ProgressSnapshot

DEFAULT_STUCK_THRESHOLD_SECONDS = 30

STUCK_REASONS = (
    "Large number of jobs to fetch",
    "Network delays",
    "API rate limiting",
)


def is_taking_longer_than_expected(
    snapshot: ProgressSnapshot,
    elapsed_seconds: float,
    threshold: float = DEFAULT_STUCK_THRESHOLD_SECONDS,
) -> bool:
    """
    Warn when a live run has fetched nothing after ``threshold`` seconds.

    A run that hit its daily limit is not considered stuck.

    Args:
        snapshot: Latest snapshot
        elapsed_seconds: Local elapsed time
        threshold: Seconds before warning

    Returns:
        bool: True if the warning should be shown
    """
    return (
        elapsed_seconds > threshold
        and snapshot.details.jobs_fetched == 0
        and not snapshot.details.limit_reached
        and not snapshot.is_terminal
    )


def daily_limit_notice(snapshot: ProgressSnapshot) -> str | None:
    """Notice shown when the run stopped at the plan's daily application limit."""
    details = snapshot.details
    if not details.limit_reached:
        return None
    notice = (
        f"Daily limit reached ({details.daily_applied or 0}/{details.daily_limit or 0} "
        "applications today)."
    )
    if details.jobs_fetched > 0:
        notice += f" Found {details.jobs_fetched} jobs but cannot apply due to daily limit."
    return notice
