"""
Doctest extraction: comment collection, script parsing and test case building.
"""

from .models import (
    Context,
    CommentRecord,
    Statement,
    Assertion,
    TestCaseCandidate,
    TestCase,
)
from .comments import collect_comments
from .script import ExtraMarkerPolicy, extract_script, extract_scripts, is_doctest
from .builder import TestCaseBuilder

__all__ = [
    "Context",
    "CommentRecord",
    "Statement",
    "Assertion",
    "TestCaseCandidate",
    "TestCase",
    "collect_comments",
    "ExtraMarkerPolicy",
    "extract_script",
    "extract_scripts",
    "is_doctest",
    "TestCaseBuilder",
]
