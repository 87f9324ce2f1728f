"""
Output dialects.

A dialect is pure data: the tokens the emitter writes for one test framework.
"""

from dataclasses import dataclass, replace
from enum import Enum
from pathlib import PurePath
from typing import Dict, Optional, Tuple, Union

from ..core.exceptions import ConfigurationError


class Nesting(Enum):
    """How test registrations are laid out."""

    GROUPED = "grouped"  # describe(class) > describe(function) > it(test)
    FLAT = "flat"  # one registration per test


# sources without type annotations
UNTYPED_SUFFIXES = frozenset({".js", ".jsx", ".mjs", ".cjs"})


@dataclass(frozen=True)
class Dialect:
    """Tokens of one test framework.

    ``equality`` is a format string with ``actual``, ``expected`` and
    ``message`` fields. ``untyped_preamble`` replaces ``preamble`` for JavaScript sources when the
    usual one holds TypeScript-only syntax.
    """

    name: str
    preamble: Tuple[str, ...]
    nesting: Nesting
    test_call: str
    equality: str
    suite_call: Optional[str] = None
    check_object: Optional[str] = None
    teardown: Optional[str] = None
    default_test_name: str = "doctest"
    untyped_preamble: Optional[Tuple[str, ...]] = None

    @property
    def is_grouped(self) -> bool:
        return self.nesting is Nesting.GROUPED

    @property
    def callback(self) -> str:
        """Arrow function head of a test body."""
        if self.check_object:
            return f"{self.check_object} =>"
        return "() =>"

    def for_source(self, path: Union[str, PurePath]) -> "Dialect":
        """The dialect to use for the doctests of the source file ``path``."""
        if self.untyped_preamble is None:
            return self
        if PurePath(path).suffix.lower() not in UNTYPED_SUFFIXES:
            return self
        return replace(self, preamble=self.untyped_preamble)


MOCHA = Dialect(
    name="mocha",
    preamble=('import "mocha"', 'import {expect as __expect} from "chai"'),
    nesting=Nesting.GROUPED,
    suite_call="describe",
    test_call="it",
    equality="__expect({actual}, {message}).to.deep.equal({expected})",
)

JEST = Dialect(
    name="jest",
    preamble=('import "jest"', "const __expect: jest.Expect = expect"),
    untyped_preamble=('import "jest"', "const __expect = expect"),
    nesting=Nesting.GROUPED,
    suite_call="describe",
    test_call="it",
    # jest's expect takes no message; its failure code frame shows the comment
    equality="__expect({actual}).toEqual({expected}) // {message}",
)

AVA = Dialect(
    name="ava",
    preamble=('import {test as __test} from "ava"',),
    nesting=Nesting.FLAT,
    test_call="__test",
    check_object="t",
    equality="t.deepEqual({actual}, {expected}, {message})",
)

TAPE = Dialect(
    name="tape",
    preamble=('import * as __test from "tape"',),
    nesting=Nesting.FLAT,
    test_call="__test",
    check_object="t",
    equality="t.deepEqual({actual}, {expected}, {message})",
    teardown="t.end()",
)

DIALECTS: Dict[str, Dialect] = {
    dialect.name: dialect for dialect in (MOCHA, JEST, AVA, TAPE)
}


def get_dialect(name: str) -> Dialect:
    """Look up a dialect by name."""
    try:
        return DIALECTS[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown dialect: {name}. Must be one of {sorted(DIALECTS)}",
            setting="dialect",
        ) from None
