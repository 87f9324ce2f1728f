"""
Unit tests for the tree-sitter helpers.
"""

import pytest

from tsdoctest.core.exceptions import SourceParseError
from tsdoctest.extraction.syntax import (
    TSX,
    TYPESCRIPT,
    code_end,
    language_for,
    parse,
    parse_source,
    text_without_comments,
)


class TestLanguageFor:
    """Test cases for grammar selection."""

    @pytest.mark.parametrize("path", ["a.ts", "a.mts", "lib/a.js", "noext"])
    def test_typescript(self, path):
        assert language_for(path) == TYPESCRIPT

    @pytest.mark.parametrize("path", ["App.tsx", "App.JSX"])
    def test_tsx(self, path):
        assert language_for(path) == TSX


class TestParseSource:
    """Test cases for whole-file parsing."""

    def test_valid_source(self, calc_source):
        tree = parse_source(calc_source, "Calc.ts")

        assert tree.root_node.type == "program"

    def test_jsx_needs_tsx_grammar(self):
        parse_source("const a = <div>hi</div>\n", "App.tsx")

    def test_error_location(self):
        with pytest.raises(SourceParseError) as exc_info:
            parse_source("const a = 1\nconst = 2\n", "broken.ts")

        assert exc_info.value.line_number == 1
        assert exc_info.value.message == "Cannot parse broken.ts:2"


class TestCommentStripping:
    """Test cases for cutting comments out of fragments."""

    def test_code_end_ignores_trailing_comment(self):
        source = "f(1) /* trailing */"
        statement = parse(source).root_node.named_children[0]

        assert source[: code_end(statement)] == "f(1)"

    def test_inner_comments_are_removed(self):
        source = "f(\n  1, // one\n  2\n)"
        statement = parse(source).root_node.named_children[0]

        assert text_without_comments(statement, source.encode("utf-8")) == "f(\n  1,\n  2\n)"
