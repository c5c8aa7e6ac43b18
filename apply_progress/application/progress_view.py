"""
Progress presentation model.

Derives everything the progress display needs from the latest snapshot
and the local elapsed time: status text, elapsed/ETA strings, counters,
the current-job line and the advisory notices.

Dependencies: pydantic, apply_progress.core, apply_progress.models
System role: Render-time derivation for progress displays (CLI, UI adapters)
"""

from pydantic import BaseModel, Field

from apply_progress.core.eta import elapsed_display, estimate_remaining
from apply_progress.core.stuck import (
    DEFAULT_STUCK_THRESHOLD_SECONDS,
    STUCK_REASONS,
    daily_limit_notice,
    is_taking_longer_than_expected,
)
from apply_progress.models.progress import ProgressSnapshot, RunStatus

DEFAULT_HEADLINE = "Processing..."

# States in which the footer close button replaces the progress spinner
CLOSABLE_STATUSES = frozenset({RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.ERROR})

STATUS_MESSAGES: dict[RunStatus, str] = {
    RunStatus.PENDING: "Initializing...",
    RunStatus.RUNNING: "Processing in background...",
    RunStatus.FETCHING: "Fetching jobs from sources...",
    RunStatus.MATCHING: "Matching jobs against your profile...",
    RunStatus.APPLYING: "Applying to matched jobs...",
    RunStatus.COMPLETED: "All done!",
    RunStatus.FAILED: "Something went wrong",
    RunStatus.ERROR: "Something went wrong",
}


class ProgressCounters(BaseModel):
    """Counter tiles."""

    fetched: int = 0
    matched: int = 0
    applied: int = 0
    failed: int = 0


class ProgressView(BaseModel):
    """Display state for one render."""

    status: RunStatus
    headline: str
    status_message: str
    elapsed: str
    remaining: str | None = None
    percent: float = Field(ge=0, le=100)
    counters: ProgressCounters
    current_job_line: str | None = None
    current_job_detail: str | None = None
    stuck_warning: bool = False
    stuck_reasons: tuple[str, ...] = ()
    limit_notice: str | None = None
    log_messages: list[str] = Field(default_factory=list)
    show_close_button: bool = False

    @property
    def is_error(self) -> bool:
        return self.status in (RunStatus.FAILED, RunStatus.ERROR)


def _current_job_lines(snapshot: ProgressSnapshot) -> tuple[str | None, str | None]:
    job = snapshot.current_job
    details = snapshot.details
    total_jobs = details.total_jobs or 0

    if job is None and not (snapshot.status is RunStatus.APPLYING and total_jobs > 0):
        return None, None

    if job is not None:
        line = f"Applying to: {job.title}" if job.title else "Applying to jobs..."
        parts = []
        if job.company:
            parts.append(f"Company: {job.company}")
        if job.index > 0:
            parts.append(f"({job.index} of {job.total})")
        return line, " ".join(parts) or None

    return "Applying to jobs...", f"({details.processed_jobs or 0} of {total_jobs})"


def build_progress_view(
    snapshot: ProgressSnapshot,
    elapsed_seconds: int,
    stuck_threshold: float = DEFAULT_STUCK_THRESHOLD_SECONDS,
) -> ProgressView:
    """
    Build the display state for a snapshot.

    Args:
        snapshot: Latest applied snapshot
        elapsed_seconds: Local elapsed time from the poller
        stuck_threshold: Seconds before the "taking longer" warning

    Returns:
        ProgressView: Derived display state
    """
    stuck = is_taking_longer_than_expected(snapshot, elapsed_seconds, stuck_threshold)
    job_line, job_detail = _current_job_lines(snapshot)
    details = snapshot.details

    return ProgressView(
        status=snapshot.status,
        headline=snapshot.current_step or DEFAULT_HEADLINE,
        status_message=STATUS_MESSAGES[snapshot.status],
        elapsed=elapsed_display(snapshot, elapsed_seconds),
        remaining=estimate_remaining(snapshot),
        percent=snapshot.progress,
        counters=ProgressCounters(
            fetched=details.jobs_fetched,
            matched=details.jobs_matched,
            applied=details.jobs_applied,
            failed=details.jobs_failed,
        ),
        current_job_line=job_line,
        current_job_detail=job_detail,
        stuck_warning=stuck,
        stuck_reasons=STUCK_REASONS if stuck else (),
        limit_notice=daily_limit_notice(snapshot),
        log_messages=[entry.message for entry in snapshot.logs],
        show_close_button=snapshot.status in CLOSABLE_STATUSES,
    )


def render_text(view: ProgressView, bar_width: int = 30) -> str:
    """Plain-text rendering used by the CLI."""
    filled = int(round(bar_width * view.percent / 100))
    lines = [
        f"{view.headline} - {view.status_message}",
        f"[{'#' * filled}{'.' * (bar_width - filled)}] {view.percent:.0f}%",
    ]

    timing = f"Elapsed: {view.elapsed}"
    if view.remaining:
        timing += f" | Est. remaining: {view.remaining}"
    lines.append(timing)

    c = view.counters
    lines.append(
        f"Fetched: {c.fetched}  Matched: {c.matched}  Applied: {c.applied}  Failed: {c.failed}"
    )

    if view.current_job_line:
        job = view.current_job_line
        if view.current_job_detail:
            job += f" {view.current_job_detail}"
        lines.append(job)
    if view.limit_notice:
        lines.append(view.limit_notice)
    if view.stuck_warning:
        lines.append("Taking longer than expected. This might be due to: " + ", ".join(view.stuck_reasons))
    for message in view.log_messages:
        lines.append(f"  - {message}")

    return "\n".join(lines)
