"""
Doctest file creation.

Reads one source file, runs it through collection, building, exposing and
emission, and writes the sibling ``.doctest`` file.
"""

import contextlib
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..core.exceptions import DoctestFileError, FileOperationError
from ..core.logging_config import get_logger, log_performance
from ..extraction.builder import TestCaseBuilder
from ..extraction.comments import collect_comments
from ..extraction.models import TestCase
from ..extraction.script import ExtraMarkerPolicy
from ..extraction.syntax import parse_source
from .dialects import Dialect, get_dialect
from .emitter import Emitter
from .exposer import expose_privates

DOCTEST_MARKER = "doctest"


def is_doctest_file(path: Union[str, Path]) -> bool:
    """True for files that are themselves generated doctest files."""
    return DOCTEST_MARKER in Path(path).name


def doctest_path(path: Union[str, Path]) -> Path:
    """``Foo.ts`` -> ``Foo.doctest.ts``."""
    path = Path(path)
    return path.with_name(f"{path.stem}.{DOCTEST_MARKER}{path.suffix}")


def write_atomic(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` so that readers never see a partial file."""
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name is not None:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
        raise FileOperationError(
            f"Failed to write {path}: {e}", file_path=str(path), operation="write"
        ) from e


def file_header(cases: Sequence[TestCase], dialect: Dialect) -> List[str]:
    """Import lines of a generated file: the dialect's, then the comments'."""
    imports = dict.fromkeys(dialect.preamble)
    for case in cases:
        imports.update(dict.fromkeys(case.imports(dialect)))
    return list(imports)


class DoctestFile:
    """Creates the ``.doctest`` sibling of one source file."""

    def __init__(
        self,
        original_path: Union[str, Path],
        dialect: Union[str, Dialect],
        extra_marker_policy: ExtraMarkerPolicy = ExtraMarkerPolicy.IGNORE,
    ):
        """Initialize the doctest file.

        Args:
            original_path: Source file holding the doctests
            dialect: Output dialect, or its name
            extra_marker_policy: Handling of repeated assertion markers

        Raises:
            DoctestFileError: If ``original_path`` is a doctest file itself
        """
        self.original_path = Path(original_path)
        if is_doctest_file(self.original_path):
            raise DoctestFileError(
                f"Not creating a doctest for a file which already is a doctest: "
                f"{self.original_path}",
                file_path=str(self.original_path),
            )
        if isinstance(dialect, str):
            dialect = get_dialect(dialect)
        self.dialect = dialect.for_source(self.original_path)
        self.logger = get_logger(
            __name__, file_path=str(self.original_path), dialect=self.dialect.name
        )
        self.builder = TestCaseBuilder(extra_marker_policy)
        self.emitter = Emitter(self.dialect)

    @property
    def output_path(self) -> Path:
        return doctest_path(self.original_path)

    def test_cases(self, source: str) -> List[TestCase]:
        """Test cases of ``source``, in discovery order."""
        file_path = str(self.original_path)
        tree = parse_source(source, file_path)
        return self.builder.from_comments(collect_comments(tree, file_path))

    def render(self, source: str, cases: Sequence[TestCase]) -> str:
        """Generated file content for ``source`` and its test cases."""
        parts = [
            "\n".join(file_header(cases, self.dialect)),
            expose_privates(source, str(self.original_path)).rstrip("\n"),
            self.emitter.emit(cases),
        ]
        return "\n\n".join(parts) + "\n"

    def generate(self, source: str) -> Optional[str]:
        """Generated file content, or None when ``source`` has no doctests."""
        cases = self.test_cases(source)
        if not cases:
            return None
        return self.render(source, cases)

    def read_source(self) -> str:
        try:
            return self.original_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise FileOperationError(
                f"Failed to read {self.original_path}: {e}",
                file_path=str(self.original_path),
                operation="read",
            ) from e

    @log_performance("doctest file creation")
    def create_test(self) -> int:
        """Create the doctest file.

        Returns:
            Number of test cases found; 0 means no file was written
        """
        source = self.read_source()
        cases = self.test_cases(source)
        if not cases:
            self.logger.info(f"No doctests found in {self.original_path}")
            return 0

        text = self.render(source, cases)
        write_atomic(self.output_path, text)
        self.logger.info(
            f"Wrote {len(cases)} doctests to {self.output_path}",
            extra={"test_count": len(cases)},
        )
        return len(cases)
