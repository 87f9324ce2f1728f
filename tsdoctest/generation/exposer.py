"""
Declaration exposer.

Generated tests live in a copy of the original file and must be able to call
restricted members, so ``private`` and ``protected`` modifiers are rewritten
to ``public``. Everything else, comments and formatting included, is kept
byte for byte.
"""

import logging
from typing import Iterator, List

from tree_sitter import Node

from ..extraction.syntax import node_text, parse_source

logger = logging.getLogger(__name__)

RESTRICTED = frozenset({"private", "protected"})
PUBLIC = b"public"


def _restricted_modifiers(node: Node) -> Iterator[Node]:
    if node.type == "accessibility_modifier":
        if node_text(node) in RESTRICTED:
            yield node
        return
    for child in node.children:
        yield from _restricted_modifiers(child)


def expose_privates(source: str, file_path: str = "<source>") -> str:
    """Return ``source`` with every restricted member made public.

    Raises:
        SourceParseError: If the source does not parse
    """
    tree = parse_source(source, file_path)
    data = source.encode("utf-8")

    pieces: List[bytes] = []
    cursor = 0
    count = 0
    for modifier in _restricted_modifiers(tree.root_node):
        pieces.append(data[cursor : modifier.start_byte])
        pieces.append(PUBLIC)
        cursor = modifier.end_byte
        count += 1
    pieces.append(data[cursor:])

    logger.debug(f"Exposed {count} restricted members in {file_path}")
    return b"".join(pieces).decode("utf-8")
