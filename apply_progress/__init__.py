"""
Apply automation progress tracking.

Client-side long-poll tracker for background Apply automation runs.
"""

__version__ = "0.1.0"
