"""
Pydantic models for run reporting.

Summaries of which files produced doctest files during a run.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FileStatus(Enum):
    """Outcome of processing one source file."""

    WRITTEN = "written"
    NO_TESTS = "no_tests"
    SKIPPED = "skipped"
    FAILED = "failed"


class FileResult(BaseModel):
    """Result of processing one source file."""

    model_config = ConfigDict(extra="forbid", use_enum_values=False)

    file_path: str = Field(..., description="Source file")
    output_path: Optional[str] = Field(None, description="Generated doctest file")
    status: FileStatus = Field(..., description="Processing outcome")
    test_count: int = Field(0, ge=0, description="Number of doctests found")
    error: Optional[str] = Field(None, description="Error message if failed")


class RunSummary(BaseModel):
    """Summary of a generation run over several files."""

    model_config = ConfigDict(extra="forbid")

    dialect: str = Field(..., description="Output dialect")
    results: List[FileResult] = Field(default_factory=list)

    def add(self, result: FileResult) -> None:
        self.results.append(result)

    def count(self, status: FileStatus) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def total_tests(self) -> int:
        return sum(r.test_count for r in self.results)

    @property
    def has_failures(self) -> bool:
        return self.count(FileStatus.FAILED) > 0

    def describe(self) -> str:
        """One-line human readable summary."""
        return (
            f"{self.total_tests} doctests in {self.count(FileStatus.WRITTEN)} files "
            f"({self.count(FileStatus.NO_TESTS)} without doctests, "
            f"{self.count(FileStatus.FAILED)} failed)"
        )

    def to_json(self) -> str:
        return self.model_dump_json(indent=2)
