"""
Base exception classes for ts-doctest.

Provides a hierarchy of exceptions for the errors that can occur while
extracting doctests from a source file and generating its test file.
"""

from typing import Optional, Dict, Any


class DoctestError(Exception):
    """Base exception class for all ts-doctest errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
        }


class SourceParseError(DoctestError):
    """Raised when a source file cannot be parsed."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
    ):
        super().__init__(message, "SOURCE_PARSE_FAILED")
        self.file_path = file_path
        self.line_number = line_number
        self.context.update(
            {
                "file_path": file_path,
                "line_number": line_number,
            }
        )


class DoctestSyntaxError(DoctestError):
    """Raised when a doctest inside a comment is malformed."""

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        fragment: Optional[str] = None,
    ):
        super().__init__(message, "DOCTEST_SYNTAX")
        self.line_number = line_number
        self.fragment = fragment
        self.context.update(
            {
                "line_number": line_number,
                "fragment": fragment,
            }
        )


class DoctestFileError(DoctestError):
    """Raised when asked to generate doctests for a generated doctest file."""

    def __init__(self, message: str, file_path: Optional[str] = None):
        super().__init__(message, "DOCTEST_FILE_REJECTED")
        self.file_path = file_path
        self.context.update({"file_path": file_path})


class FileOperationError(DoctestError):
    """Raised when file system operations fail."""

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message, "FILE_OPERATION_FAILED")
        self.file_path = file_path
        self.operation = operation
        self.context.update(
            {
                "file_path": file_path,
                "operation": operation,
            }
        )


class ConfigurationError(DoctestError):
    """Raised when the run configuration is invalid."""

    def __init__(
        self,
        message: str,
        setting: Optional[str] = None,
        violations: Optional[list] = None,
    ):
        super().__init__(message, "CONFIGURATION_INVALID")
        self.setting = setting
        self.violations = violations or []
        self.context.update(
            {
                "setting": setting,
                "violations": violations,
            }
        )
