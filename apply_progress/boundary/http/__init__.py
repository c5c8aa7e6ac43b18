"""HTTP adapters for the Apply API."""

from apply_progress.boundary.http.apply_client import ApplyApiClient

__all__ = ["ApplyApiClient"]
