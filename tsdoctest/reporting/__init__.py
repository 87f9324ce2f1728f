"""
Run reporting models.
"""

from .models import FileStatus, FileResult, RunSummary

__all__ = [
    "FileStatus",
    "FileResult",
    "RunSummary",
]
