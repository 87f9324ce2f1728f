"""
Doctest script parsing.

Turns the text of one doc comment into test case candidates. A comment is
split into blank-line separated paragraphs; every paragraph containing an
assertion marker is a doctest::

    // optional test name
    const a = new A()
    a.x() // => 42
    a.y() /* => "why" */

Expression statements directly followed by a marker become assertions, every
other statement is kept as plain code, in written order.
"""

import logging
import re
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from ..core.exceptions import DoctestSyntaxError
from .models import Assertion, Operation, ScriptBlock, Statement, TestCaseCandidate
from .syntax import TYPESCRIPT, code_end, is_comment, parse, text_without_comments

logger = logging.getLogger(__name__)

_MARKER = re.compile(r"//[ \t]*=>|/\*[ \t]*=>")
_MARKER_RHS = re.compile(
    r"^[ \t]*(?://[ \t]*=>([^\n]*)|/\*[ \t]*=>(.*?)\*/)", re.MULTILINE | re.DOTALL
)
_NAME = re.compile(r"^[ \t]*//([^\n]*)")
_PARAGRAPH_BREAK = re.compile(r"\n(?:[ \t]*\n)+")
_LEADING_BLANK_LINES = re.compile(r"^(?:[ \t]*\n)*")

# Statement kinds that end with a `;` when written out in full
SEMICOLON_TERMINATED = frozenset(
    {
        "expression_statement",
        "lexical_declaration",
        "variable_declaration",
        "return_statement",
        "throw_statement",
        "break_statement",
        "continue_statement",
        "debugger_statement",
        "do_statement",
        "type_alias_declaration",
    }
)


class ExtraMarkerPolicy(Enum):
    """What to do with a second marker following the same expression."""

    IGNORE = "ignore"
    WARN = "warn"
    ERROR = "error"


def is_doctest(text: str) -> bool:
    """True when the text holds an assertion marker.

    >>> is_doctest("// => true")
    True
    >>> is_doctest("// true")
    False
    """
    return _MARKER.search(text) is not None


def _expected_text(match: "re.Match") -> str:
    return match.group(1) if match.group(1) is not None else match.group(2)


def extract_imports(text: str, language: str = TYPESCRIPT) -> Tuple[str, ...]:
    """Import statements of every paragraph, comments cut out, in order."""
    imports = []
    for _, paragraph in split_paragraphs(text):
        source = paragraph.encode("utf-8")
        for node in parse(paragraph, language).root_node.named_children:
            if node.type == "import_statement" and not node.has_error:
                imports.append(text_without_comments(node, source))
    return tuple(imports)


def split_paragraphs(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(start line, paragraph)`` for each blank-line separated paragraph."""
    start = 0
    for match in _PARAGRAPH_BREAK.finditer(text):
        yield from _paragraph(text, start, match.start())
        start = match.end()
    yield from _paragraph(text, start, len(text))


def _paragraph(text: str, start: int, end: int) -> Iterator[Tuple[int, str]]:
    chunk = text[start:end]
    lead = _LEADING_BLANK_LINES.match(chunk).end()
    chunk = chunk[lead:]
    if chunk.strip():
        yield text.count("\n", 0, start + lead), chunk


def paragraph_name(paragraph: str) -> Optional[str]:
    """Name given by a leading ``// ...`` line, unless that line is a marker."""
    match = _NAME.match(paragraph)
    if match is None or match.group(1).lstrip().startswith("=>"):
        return None
    return match.group(1).strip()


def extract_script(
    paragraph: str,
    line: int = 0,
    language: str = TYPESCRIPT,
    extra_marker_policy: ExtraMarkerPolicy = ExtraMarkerPolicy.IGNORE,
) -> ScriptBlock:
    """Parse one paragraph into statements and assertions.

    ``line`` is the paragraph's first line; assertion lines are offset from it.
    """
    source = paragraph.encode("utf-8")
    tree = parse(paragraph, language)
    fragments = [node for node in tree.root_node.named_children if not is_comment(node)]

    operations: List[Operation] = []
    for i, fragment in enumerate(fragments):
        if fragment.type == "import_statement":
            # hoisted by extract_imports
            continue

        region_start = code_end(fragment)
        region_end = fragments[i + 1].start_byte if i + 1 < len(fragments) else len(source)
        region = source[region_start:region_end].decode("utf-8")
        markers = list(_MARKER_RHS.finditer(region))

        expected = _expected_text(markers[0]).strip() if markers else ""
        if expected and fragment.type == "expression_statement":
            expression = next(c for c in fragment.named_children if not is_comment(c))
            lhs = text_without_comments(expression, source)
            region_line = line + source.count(b"\n", 0, region_start)
            operations.append(
                Assertion(
                    lhs=lhs,
                    rhs=expected,
                    line=region_line + region.count("\n", 0, markers[0].start()),
                )
            )
            for extra in markers[1:]:
                _extra_marker(
                    extra_marker_policy,
                    lhs,
                    region_line + region.count("\n", 0, extra.start()),
                )
            continue

        code = text_without_comments(fragment, source)
        if fragment.type in SEMICOLON_TERMINATED and not code.endswith(";"):
            code += ";"
        operations.append(Statement(code=code))

    return tuple(operations)


def _extra_marker(policy: ExtraMarkerPolicy, lhs: str, line: int) -> None:
    message = (
        f"Assertion marker at comment line {line} follows another marker for "
        f"'{lhs}'; only the first marker after an expression is checked"
    )
    if policy is ExtraMarkerPolicy.ERROR:
        raise DoctestSyntaxError(message, line_number=line, fragment=lhs)
    if policy is ExtraMarkerPolicy.WARN:
        logger.warning(message)
    else:
        logger.debug(message)


def extract_scripts(
    text: str,
    language: str = TYPESCRIPT,
    extra_marker_policy: ExtraMarkerPolicy = ExtraMarkerPolicy.IGNORE,
) -> List[TestCaseCandidate]:
    """Test case candidates of one comment, one per doctest paragraph."""
    candidates = []
    for line, paragraph in split_paragraphs(text):
        if not is_doctest(paragraph):
            continue
        script = extract_script(paragraph, line, language, extra_marker_policy)
        candidates.append(
            TestCaseCandidate(script=script, line=line, name=paragraph_name(paragraph))
        )
    return candidates
