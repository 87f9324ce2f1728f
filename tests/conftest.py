"""
Pytest configuration and shared fixtures for ts-doctest tests.

Provides sample TypeScript sources, temporary source files and a factory for
resolved test cases.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from tsdoctest.core.config import Config
from tsdoctest.extraction.models import Assertion, Context, TestCase


CALC_SOURCE = """export class Calc {
    /**
     * Doubles a number.
     *
     * Calc.double(21) // => 42
     */
    private static double(n: number): number {
        return n * 2
    }
}
"""

HAS_FOO_SOURCE = """/** Does this string contain foo, ignoring case?

    hasFoo('___foo__') // => true
    hasFoo('   fOO  ') // => true
    hasFoo('bar') // => false

*/
function hasFoo(s: string): boolean {
  return null != s.match(/foo/i)
}
"""

PLAIN_SOURCE = """/** Adds two numbers. */
export function add(a: number, b: number): number {
    return a + b
}
"""


@pytest.fixture(autouse=True)
def clean_environment():
    """Run every test without the CI and TS_DOCTEST_* environment of the host."""
    env = {
        k: v
        for k, v in os.environ.items()
        if k != "CI" and not k.startswith("TS_DOCTEST_")
    }
    with patch.dict(os.environ, env, clear=True):
        yield


@pytest.fixture
def calc_source():
    return CALC_SOURCE


@pytest.fixture
def has_foo_source():
    return HAS_FOO_SOURCE


@pytest.fixture
def calc_file(tmp_path) -> Path:
    """A source file with one doctest on a private static method."""
    path = tmp_path / "Calc.ts"
    path.write_text(CALC_SOURCE, encoding="utf-8")
    return path


@pytest.fixture
def plain_file(tmp_path) -> Path:
    """A documented source file without any doctest."""
    path = tmp_path / "add.ts"
    path.write_text(PLAIN_SOURCE, encoding="utf-8")
    return path


@pytest.fixture
def mocha_config():
    """A valid mocha configuration."""
    config = Config(dialect="mocha")
    config.log_level = "DEBUG"
    return config


@pytest.fixture
def make_case():
    """Factory for resolved test cases."""

    def _make(
        class_name=None,
        function_name=None,
        test_name=None,
        body=None,
        file_path="testfile.ts",
        extra_imports=(),
    ):
        if body is None:
            body = (Assertion(lhs="A.x()", rhs="42", line=6),)
        context = Context(
            file_path=file_path,
            class_name=class_name,
            function_name=function_name,
            line_number=0,
            test_name=test_name,
        )
        return TestCase(body=tuple(body), context=context, extra_imports=tuple(extra_imports))

    return _make

