"""Core components for ts-doctest."""

from .config import Config
from .exceptions import (
    DoctestError,
    SourceParseError,
    DoctestSyntaxError,
    DoctestFileError,
    FileOperationError,
    ConfigurationError,
)
from .logging_config import setup_logging

__all__ = [
    "Config",
    "DoctestError",
    "SourceParseError",
    "DoctestSyntaxError",
    "DoctestFileError",
    "FileOperationError",
    "ConfigurationError",
    "setup_logging",
]
