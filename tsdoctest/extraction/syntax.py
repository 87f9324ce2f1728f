"""Tree-sitter helpers shared by the extraction and generation stages."""

from functools import lru_cache
from pathlib import PurePath
from typing import Iterator, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from ..core.exceptions import SourceParseError

TYPESCRIPT = "typescript"
TSX = "tsx"

_LANGUAGES = {
    TYPESCRIPT: Language(tree_sitter_typescript.language_typescript()),
    TSX: Language(tree_sitter_typescript.language_tsx()),
}

_JSX_SUFFIXES = {".tsx", ".jsx"}


def language_for(file_path: str) -> str:
    """Pick the grammar for a file from its extension."""
    if PurePath(file_path).suffix.lower() in _JSX_SUFFIXES:
        return TSX
    return TYPESCRIPT


@lru_cache(maxsize=None)
def _parser(language: str) -> Parser:
    return Parser(_LANGUAGES[language])


def parse(source: str, language: str = TYPESCRIPT) -> Tree:
    """Parse source text. Never fails; syntax errors show up as ERROR nodes."""
    return _parser(language).parse(source.encode("utf-8"))


def parse_source(source: str, file_path: str) -> Tree:
    """Parse a whole source file, raising if it does not parse cleanly."""
    tree = parse(source, language_for(file_path))
    if tree.root_node.has_error:
        error = first_error(tree.root_node)
        line = error.start_point[0] if error is not None else None
        location = f"{file_path}:{line + 1}" if line is not None else file_path
        raise SourceParseError(
            f"Cannot parse {location}", file_path=file_path, line_number=line
        )
    return tree


def first_error(node: Node) -> Optional[Node]:
    """Return the first ERROR or MISSING node in document order."""
    if node.type == "ERROR" or node.is_missing:
        return node
    for child in node.children:
        if child.has_error:
            found = first_error(child)
            if found is not None:
                return found
    return None


def node_text(node: Node) -> str:
    return node.text.decode("utf-8")


def is_comment(node: Node) -> bool:
    return node.type == "comment"


def iter_comments(node: Node) -> Iterator[Node]:
    """Yield every comment node below (and including) ``node``."""
    if is_comment(node):
        yield node
        return
    for child in node.children:
        yield from iter_comments(child)


def code_end(node: Node) -> int:
    """Byte offset where the code of ``node`` ends, ignoring trailing comments."""
    children = [child for child in node.children if not is_comment(child)]
    if not children:
        return node.end_byte
    return code_end(children[-1])


def text_without_comments(node: Node, source: bytes) -> str:
    """Source text of ``node`` up to its code end, with comments cut out."""
    start, end = node.start_byte, code_end(node)
    pieces = []
    cursor = start
    for comment in iter_comments(node):
        if comment.start_byte >= end:
            break
        pieces.append(source[cursor : comment.start_byte])
        cursor = comment.end_byte
    pieces.append(source[cursor:end])
    text = b"".join(pieces).decode("utf-8")
    return "\n".join(line.rstrip() for line in text.split("\n")).strip()
