"""
Test code emission.

Groups the test cases of a file by class and function, then writes them out
in one dialect.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence

from ..extraction.models import Assertion, TestCase
from .dialects import Dialect

logger = logging.getLogger(__name__)

INDENT = "    "


@dataclass
class Suite:
    """A named group of test cases with nested groups."""

    title: Optional[str]
    cases: List[TestCase] = field(default_factory=list)
    children: List["Suite"] = field(default_factory=list)

    def walk(self) -> Iterator[TestCase]:
        """All cases in emission order: nested groups first, then own cases."""
        for child in self.children:
            yield from child.walk()
        yield from self.cases


def show(value: str) -> str:
    """A TypeScript string literal for ``value``."""
    return json.dumps(value, ensure_ascii=False)


def _first_seen(names: Iterable[Optional[str]]) -> List[str]:
    seen: List[str] = []
    for name in names:
        if name is not None and name not in seen:
            seen.append(name)
    return seen


def _fill(suite: Suite, cases: Sequence[TestCase]) -> None:
    """Nest ``cases`` (all of one class) under ``suite`` by function name."""
    for function_name in _first_seen(c.context.function_name for c in cases):
        suite.children.append(
            Suite(
                title=function_name,
                cases=[c for c in cases if c.context.function_name == function_name],
            )
        )
    suite.cases.extend(c for c in cases if c.context.function_name is None)


def group_cases(cases: Sequence[TestCase]) -> Suite:
    """Group cases into class suites holding function suites.

    Classes and functions keep their first-seen order and cases keep their
    discovery order. Cases outside any class follow all class suites.
    """
    root = Suite(title=None)
    for class_name in _first_seen(c.context.class_name for c in cases):
        suite = Suite(title=class_name)
        _fill(suite, [c for c in cases if c.context.class_name == class_name])
        root.children.append(suite)
    _fill(root, [c for c in cases if c.context.class_name is None])
    return root


def _indent_block(text: str, indent: str) -> List[str]:
    return [indent + line if line else line for line in text.split("\n")]


class Emitter:
    """Renders test cases as test code of one dialect."""

    def __init__(self, dialect: Dialect):
        self.dialect = dialect

    def diagnostic(self, case: TestCase, assertion: Assertion) -> str:
        """Failure message pointing at the assertion in the original file."""
        context = case.context
        function_name = context.function_name or "<anonymous>"
        return f"failed at {function_name} ({context.file_path}:{assertion.line + 1}:1)"

    def test_name(self, case: TestCase) -> str:
        context = case.context
        if context.test_name:
            return context.test_name
        if self.dialect.is_grouped and context.function_name:
            return context.function_name
        return self.dialect.default_test_name

    def render_case(self, case: TestCase, indent: str = "") -> List[str]:
        dialect = self.dialect
        body_indent = indent + INDENT
        lines = [f"{indent}{dialect.test_call}({show(self.test_name(case))}, {dialect.callback} {{"]
        for op in case.body:
            if isinstance(op, Assertion):
                check = dialect.equality.format(
                    actual=op.lhs,
                    expected=op.rhs,
                    message=show(self.diagnostic(case, op)),
                )
                lines.extend(_indent_block(check, body_indent))
            else:
                lines.extend(_indent_block(op.code, body_indent))
        if dialect.teardown:
            lines.append(body_indent + dialect.teardown)
        lines.append(f"{indent}}})")
        return lines

    def render_suite(self, suite: Suite, indent: str = "") -> List[str]:
        lines = [f"{indent}{self.dialect.suite_call}({show(suite.title)}, () => {{"]
        for child in suite.children:
            lines.extend(self.render_suite(child, indent + INDENT))
        for case in suite.cases:
            lines.extend(self.render_case(case, indent + INDENT))
        lines.append(f"{indent}}})")
        return lines

    def blocks(self, cases: Sequence[TestCase]) -> List[str]:
        """One block of code per top-level registration."""
        root = group_cases(cases)
        if not self.dialect.is_grouped:
            return ["\n".join(self.render_case(case)) for case in root.walk()]

        blocks = ["\n".join(self.render_suite(child)) for child in root.children]
        blocks.extend("\n".join(self.render_case(case)) for case in root.cases)
        return blocks

    def emit(self, cases: Sequence[TestCase]) -> str:
        """Test code for all cases of a file."""
        blocks = self.blocks(cases)
        logger.debug(
            f"Emitted {len(cases)} test cases as {len(blocks)} {self.dialect.name} blocks"
        )
        return "\n\n".join(blocks)
