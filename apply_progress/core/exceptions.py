"""
Exception hierarchy for the Apply progress tracker.

Provides layered exception structure for transport and run-lifecycle errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class ApplyProgressError(Exception):
    """Base exception for all Apply progress tracker errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class RunNotFoundError(ApplyProgressError):
    """Raised when a run is not (yet) known to the status endpoint."""

    def __init__(self, run_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize run not found error.

        Args:
            run_id: ID of the missing run
            details: Additional context
        """
        details = details or {}
        details["run_id"] = run_id
        self.run_id = run_id
        super().__init__(f"Run not found: {run_id}", details)


class ProgressFetchError(ApplyProgressError):
    """Raised when the progress endpoint cannot be read (network, non-404 HTTP, bad body)."""

    def __init__(
        self,
        message: str,
        run_id: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize progress fetch error.

        Args:
            message: Error message
            run_id: Run being polled
            status_code: HTTP status code, when a response was received
            details: Additional context
        """
        details = details or {}
        if run_id:
            details["run_id"] = run_id
        if status_code is not None:
            details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, details)


class MalformedSnapshotError(ApplyProgressError):
    """Raised when a decoded progress payload is not a valid snapshot."""

    pass


class AutomationStartError(ApplyProgressError):
    """Raised when the automation run cannot be started."""

    pass


class RunAlreadyFinishedError(ApplyProgressError):
    """Raised when a snapshot is published for a run that already reached a terminal status."""

    def __init__(self, run_id: str, status: str) -> None:
        super().__init__(
            f"Run {run_id} already finished with status {status}",
            {"run_id": run_id, "status": status},
        )
