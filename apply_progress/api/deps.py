"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: apply_progress.application
System role: DI container for service injection
"""

from functools import lru_cache

from apply_progress.application.services.run_registry import RunRegistry


@lru_cache
def get_run_registry() -> RunRegistry:
    """Process-wide run registry."""
    return RunRegistry()
