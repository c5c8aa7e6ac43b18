"""
Application services.

Exports service orchestrators for runs and progress tracking.
"""

from apply_progress.application.services.automation_service import AutomationService
from apply_progress.application.services.run_registry import RunRegistry

__all__ = ["AutomationService", "RunRegistry"]
