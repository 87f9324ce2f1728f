"""
ts-doctest - doctests for TypeScript

Extracts the examples written in documentation comments, such as
``a.x() // => 42``, and generates mocha, jest, ava or tape test files from them.
"""

__version__ = "0.1.0"

from .core.config import Config
from .core.exceptions import DoctestError
from .core.logging_config import setup_logging
from .generation.creator import DoctestFile

__all__ = [
    "Config",
    "DoctestError",
    "setup_logging",
    "DoctestFile",
]
