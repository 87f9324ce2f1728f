"""
Data models for doctest extraction.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Any, Optional, Tuple, Union


@dataclass(frozen=True)
class Context:
    """Lexical path of a comment: file, class, function and test."""

    file_path: str
    class_name: Optional[str] = None
    function_name: Optional[str] = None
    line_number: Optional[int] = None
    test_name: Optional[str] = None

    def derive(self, **changes: Any) -> "Context":
        """Return a child context overriding the given fields."""
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "file_path": self.file_path,
            "class_name": self.class_name,
            "function_name": self.function_name,
            "line_number": self.line_number,
            "test_name": self.test_name,
        }


@dataclass(frozen=True)
class CommentRecord:
    """One doc comment body, or one tag of it, and where it was found."""

    text: str
    context: Context


@dataclass(frozen=True)
class Statement:
    """A fragment executed for its side effect."""

    code: str


@dataclass(frozen=True)
class Assertion:
    """An expression whose value must deep-equal the expected expression."""

    lhs: str
    rhs: str
    line: int


Operation = Union[Statement, Assertion]
ScriptBlock = Tuple[Operation, ...]


@dataclass(frozen=True)
class TestCaseCandidate:
    """A doctest paragraph of a comment, before it is placed in a file."""

    __test__ = False

    script: ScriptBlock
    line: int
    name: Optional[str] = None


@dataclass(eq=False)
class TestCase:
    """A resolved doctest, ready to be emitted.

    Compared by identity: two textually identical cases are still two tests.
    """

    __test__ = False

    body: ScriptBlock
    context: Context
    extra_imports: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def assertions(self) -> Tuple[Assertion, ...]:
        return tuple(op for op in self.body if isinstance(op, Assertion))

    def imports(self, dialect) -> Tuple[str, ...]:
        """Imports this case needs: its own, then the dialect's fixed preamble."""
        return self.extra_imports + tuple(dialect.preamble)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "context": self.context.to_dict(),
            "extra_imports": list(self.extra_imports),
            "statements": sum(1 for op in self.body if isinstance(op, Statement)),
            "assertions": len(self.assertions),
        }
