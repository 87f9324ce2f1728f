"""
Test generation components: dialects, emission, member exposure and file creation.
"""

from .dialects import Dialect, DIALECTS, Nesting, get_dialect
from .emitter import Emitter, Suite, group_cases
from .exposer import expose_privates
from .creator import DoctestFile, doctest_path, is_doctest_file

__all__ = [
    "Dialect",
    "DIALECTS",
    "Nesting",
    "get_dialect",
    "Emitter",
    "Suite",
    "group_cases",
    "expose_privates",
    "DoctestFile",
    "doctest_path",
    "is_doctest_file",
]
