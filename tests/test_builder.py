"""
Unit tests for TestCaseBuilder.

Tests absolute line numbers, naming of test cases, import hoisting and
error reporting for malformed doctests.
"""

import logging

import pytest

from tsdoctest.core.exceptions import DoctestSyntaxError
from tsdoctest.extraction.builder import TestCaseBuilder
from tsdoctest.extraction.models import Assertion, CommentRecord, Context, Statement
from tsdoctest.extraction.script import ExtraMarkerPolicy

X_COMMENT_TEXT = (
    "\n"
    "some actual comment about x()\n"
    "\n"
    "A.x() // => 42\n"
    "\n"
    "A.x() + 1 // => 43\n"
    "A.x() - 1 // => 41\n"
    "\n"
    "// should equal 2 * 21\n"
    "A.x() // => 21 * 2"
)


@pytest.fixture
def x_record():
    """The doc comment of ``A.x`` starting on line 3 of its file."""
    context = Context(file_path="testfile.ts", class_name="A", function_name="x", line_number=3)
    return CommentRecord(text=X_COMMENT_TEXT, context=context)


class TestTestCaseBuilder:
    """Test cases for building test cases from comment records."""

    def test_one_case_per_doctest_paragraph(self, x_record):
        cases = TestCaseBuilder().from_comment(x_record)

        assert len(cases) == 3

    def test_assertion_lines_are_absolute(self, x_record):
        cases = TestCaseBuilder().from_comment(x_record)

        lines = [a.line for case in cases for a in case.assertions]
        assert lines == [6, 8, 9, 12]

    def test_each_case_is_logged(self, x_record, caplog):
        with caplog.at_level(logging.DEBUG, logger="tsdoctest.extraction.builder"):
            TestCaseBuilder().from_comment(x_record)

        built = [r.metadata for r in caplog.records if r.getMessage() == "Built test case"]
        assert [m["assertions"] for m in built] == [1, 2, 1]
        assert built[0]["context"]["class_name"] == "A"

    def test_case_line_is_paragraph_start(self, x_record):
        cases = TestCaseBuilder().from_comment(x_record)

        assert [c.context.line_number for c in cases] == [6, 8, 11]

    def test_names(self, x_record):
        cases = TestCaseBuilder().from_comment(x_record)

        assert [c.context.test_name for c in cases] == [
            "doctest 0",
            "doctest 1",
            "should equal 2 * 21",
        ]

    def test_context_is_inherited(self, x_record):
        case = TestCaseBuilder().from_comment(x_record)[0]

        assert case.context.file_path == "testfile.ts"
        assert case.context.class_name == "A"
        assert case.context.function_name == "x"

    def test_record_without_line_is_anchored_at_zero(self):
        record = CommentRecord(text="a // => 1", context=Context(file_path="f.ts"))

        case = TestCaseBuilder().from_comment(record)[0]

        assert case.body == (Assertion(lhs="a", rhs="1", line=0),)

    def test_imports_are_collected(self):
        text = 'import {A} from "./A"\n\nconst a = new A()\na.x() // => 1'
        record = CommentRecord(text=text, context=Context(file_path="f.ts", line_number=0))

        case = TestCaseBuilder().from_comment(record)[0]

        assert case.extra_imports == ('import {A} from "./A"',)
        assert case.body[0] == Statement(code="const a = new A();")

    def test_prose_comment_has_no_cases(self):
        record = CommentRecord(text="Just words.", context=Context(file_path="f.ts"))

        assert TestCaseBuilder().from_comment(record) == []

    def test_syntax_error_carries_file_location(self):
        record = CommentRecord(
            text="a // => 1\n// => 2", context=Context(file_path="f.ts", line_number=10)
        )
        builder = TestCaseBuilder(ExtraMarkerPolicy.ERROR)

        with pytest.raises(DoctestSyntaxError) as exc_info:
            builder.from_comment(record)

        assert exc_info.value.line_number == 11
        assert exc_info.value.message.startswith("f.ts:12: ")

    def test_from_comments_keeps_record_order(self):
        records = [
            CommentRecord(text="b // => 2", context=Context(file_path="f.ts", function_name="b")),
            CommentRecord(text="a // => 1", context=Context(file_path="f.ts", function_name="a")),
        ]

        cases = TestCaseBuilder().from_comments(records)

        assert [c.context.function_name for c in cases] == ["b", "a"]


class TestTestCase:
    """Test cases for the TestCase model."""

    def test_imports_put_own_imports_first(self, make_case):
        from tsdoctest.generation.dialects import MOCHA

        case = make_case(extra_imports=['import {A} from "./A"'])

        assert case.imports(MOCHA) == ('import {A} from "./A"',) + MOCHA.preamble

    def test_identical_cases_are_distinct(self, make_case):
        assert make_case() != make_case()

    def test_to_dict(self, make_case):
        data = make_case(function_name="x").to_dict()

        assert data["context"]["function_name"] == "x"
        assert data["assertions"] == 1
        assert data["statements"] == 0
