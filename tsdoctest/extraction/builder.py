"""
Test case building.

Runs the script parser over every comment record of a file and resolves the
result into ``TestCase`` objects with absolute line numbers and names.
"""

import logging
from dataclasses import replace
from typing import Iterable, List

from ..core.exceptions import DoctestSyntaxError
from .models import Assertion, CommentRecord, TestCase
from .script import ExtraMarkerPolicy, extract_imports, extract_scripts
from .syntax import language_for

logger = logging.getLogger(__name__)


class TestCaseBuilder:
    """Builds the ordered test cases of one file from its comment records."""

    __test__ = False

    def __init__(self, extra_marker_policy: ExtraMarkerPolicy = ExtraMarkerPolicy.IGNORE):
        self.extra_marker_policy = extra_marker_policy

    def from_comment(self, record: CommentRecord) -> List[TestCase]:
        """Test cases found in one comment record."""
        context = record.context
        anchor = context.line_number or 0
        language = language_for(context.file_path)
        imports = extract_imports(record.text, language)

        try:
            candidates = extract_scripts(
                record.text,
                language=language,
                extra_marker_policy=self.extra_marker_policy,
            )
        except DoctestSyntaxError as e:
            line = anchor + (e.line_number or 0)
            raise DoctestSyntaxError(
                f"{context.file_path}:{line + 1}: {e.message}",
                line_number=line,
                fragment=e.fragment,
            ) from e

        cases = []
        for i, candidate in enumerate(candidates):
            body = tuple(
                replace(op, line=anchor + op.line) if isinstance(op, Assertion) else op
                for op in candidate.script
            )
            case = TestCase(
                body=body,
                context=context.derive(
                    line_number=anchor + candidate.line,
                    test_name=candidate.name or f"doctest {i}",
                ),
                extra_imports=imports,
            )
            logger.debug("Built test case", extra={"metadata": case.to_dict()})
            cases.append(case)
        return cases

    def from_comments(self, records: Iterable[CommentRecord]) -> List[TestCase]:
        """Test cases of a whole file, in comment order."""
        cases: List[TestCase] = []
        for record in records:
            cases.extend(self.from_comment(record))
        logger.debug(f"Built {len(cases)} test cases")
        return cases
