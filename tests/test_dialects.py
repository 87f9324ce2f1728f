"""
Unit tests for output dialects.
"""

import pytest

from tsdoctest.core.exceptions import ConfigurationError
from tsdoctest.generation.dialects import DIALECTS, JEST, MOCHA, Nesting, get_dialect


class TestDialects:
    """Test cases for the dialect table."""

    def test_all_dialects_registered(self):
        assert list(DIALECTS) == ["mocha", "jest", "ava", "tape"]

    @pytest.mark.parametrize("name", ["mocha", "jest"])
    def test_grouped_dialects(self, name):
        dialect = get_dialect(name)

        assert dialect.nesting is Nesting.GROUPED
        assert dialect.suite_call == "describe"
        assert dialect.callback == "() =>"

    @pytest.mark.parametrize("name", ["ava", "tape"])
    def test_flat_dialects_pass_check_object(self, name):
        dialect = get_dialect(name)

        assert not dialect.is_grouped
        assert dialect.callback == "t =>"

    def test_only_tape_needs_teardown(self):
        assert [d.name for d in DIALECTS.values() if d.teardown] == ["tape"]

    def test_equality_template_fields(self):
        for dialect in DIALECTS.values():
            rendered = dialect.equality.format(actual="ACT", expected="EXP", message="MSG")

            assert "ACT" in rendered
            assert "EXP" in rendered
            assert "MSG" in rendered

    def test_preambles(self):
        assert get_dialect("mocha").preamble == (
            'import "mocha"',
            'import {expect as __expect} from "chai"',
        )
        assert get_dialect("jest").preamble == (
            'import "jest"',
            "const __expect: jest.Expect = expect",
        )

    @pytest.mark.parametrize("path", ["a.js", "src/App.jsx", "a.mjs", "a.CJS"])
    def test_jest_javascript_preamble(self, path):
        dialect = JEST.for_source(path)

        assert dialect.preamble == ('import "jest"', "const __expect = expect")
        assert dialect.equality == JEST.equality

    @pytest.mark.parametrize("path", ["a.ts", "App.tsx", "a.mts"])
    def test_jest_typescript_preamble(self, path):
        assert JEST.for_source(path) is JEST

    def test_dialects_without_untyped_preamble(self):
        assert MOCHA.for_source("a.js") is MOCHA

    def test_unknown_dialect(self):
        with pytest.raises(ConfigurationError) as exc_info:
            get_dialect("jasmine")

        assert exc_info.value.setting == "dialect"
        assert "jasmine" in exc_info.value.message
