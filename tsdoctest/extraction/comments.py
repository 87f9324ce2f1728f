"""
Doc comment collection.

Walks a parsed source file and pairs every ``/** ... */`` comment with the
declaration it documents, yielding one ``CommentRecord`` per comment body and
one per documentation tag that carries text.
"""

import logging
import re
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from tree_sitter import Node, Tree

from .models import CommentRecord, Context
from .syntax import is_comment, node_text

logger = logging.getLogger(__name__)

_MARGIN = re.compile(r"^[ \t]*\*? ?")
_TAG = re.compile(r"^@([A-Za-z][\w-]*)(.*)$")

CLASS_LIKE = frozenset(
    {
        "class_declaration",
        "abstract_class_declaration",
        "class",
        "internal_module",
        "module",
    }
)


def _declared_name(node: Node) -> Optional[str]:
    name = node.child_by_field_name("name")
    if name is None:
        return None
    return node_text(name)


def _module_name(node: Node) -> Optional[str]:
    name = _declared_name(node)
    return name.strip("'\"") if name else None


def _member_name(node: Node) -> Optional[str]:
    # constructors are method definitions named "constructor"
    return _declared_name(node)


def _property_key(node: Node) -> Optional[str]:
    key = node.child_by_field_name("key")
    if key is None or key.type == "computed_property_name":
        return None
    return node_text(key).strip("'\"")


def _variable_name(node: Node) -> Optional[str]:
    declarators = [c for c in node.named_children if c.type == "variable_declarator"]
    if len(declarators) != 1:
        return None
    name = declarators[0].child_by_field_name("name")
    if name is None or name.type != "identifier":
        return None
    return node_text(name)


NameRule = Callable[[Node], Optional[str]]

NAME_RULES: Dict[str, NameRule] = {
    # classes and namespaces
    "class_declaration": _declared_name,
    "abstract_class_declaration": _declared_name,
    "class": _declared_name,
    "internal_module": _declared_name,
    "module": _module_name,
    # types
    "interface_declaration": _declared_name,
    "enum_declaration": _declared_name,
    "type_alias_declaration": _declared_name,
    # functions
    "function_declaration": _declared_name,
    "generator_function_declaration": _declared_name,
    "function_signature": _declared_name,
    # class and interface members, constructors included
    "method_definition": _member_name,
    "method_signature": _member_name,
    "abstract_method_signature": _member_name,
    "public_field_definition": _member_name,
    "property_signature": _member_name,
    # object literal properties
    "pair": _property_key,
    # variables
    "lexical_declaration": _variable_name,
    "variable_declaration": _variable_name,
}


def unwrap(node: Node) -> Node:
    """Strip ``export``/``declare`` wrappers down to the declaration itself."""
    if node.type == "export_statement":
        inner = node.child_by_field_name("declaration")
        return unwrap(inner) if inner is not None else node
    if node.type == "ambient_declaration":
        for child in node.named_children:
            if not is_comment(child):
                return unwrap(child)
        return node
    if node.type == "expression_statement":
        # `namespace A {}` parses as an expression
        inner = node.named_children[0] if node.named_children else None
        if inner is not None and inner.type in CLASS_LIKE:
            return inner
    return node


def declaration_name(node: Node) -> Optional[str]:
    """Name of the declaration ``node`` stands for, or None if it has none."""
    declaration = unwrap(node)
    rule = NAME_RULES.get(declaration.type)
    return rule(declaration) if rule is not None else None


def is_doc_comment(node: Node) -> bool:
    if not is_comment(node):
        return False
    text = node.text
    return text.startswith(b"/**") and not text.startswith(b"/**/")


def clean_comment(raw: str) -> List[str]:
    """Strip delimiters and margins from a doc comment, one entry per line."""
    body = raw[3:-2] if raw.endswith("*/") else raw[3:]
    lines = []
    for i, line in enumerate(body.split("\n")):
        line = line.rstrip()
        if i == 0:
            line = line.strip()
        else:
            line = _MARGIN.sub("", line, count=1)
        lines.append(line)
    return lines


def split_tags(lines: Sequence[str]) -> Tuple[List[str], List[Tuple[int, str, List[str]]]]:
    """Split cleaned comment lines into the body and its tags.

    Each tag is ``(line offset, tag name, text lines)``; the first text line
    is whatever follows the tag name on the tag's own line.
    """
    body: List[str] = []
    tags: List[Tuple[int, str, List[str]]] = []
    for offset, line in enumerate(lines):
        match = _TAG.match(line)
        if match:
            tags.append((offset, match.group(1), [match.group(2).strip()]))
        elif tags:
            tags[-1][2].append(line)
        else:
            body.append(line)
    return body, tags


def comment_records(comment: Node, context: Context) -> Iterator[CommentRecord]:
    """Records for one doc comment: its body first, then each tag with text."""
    anchor = comment.start_point[0]
    body, tags = split_tags(clean_comment(node_text(comment)))

    text = "\n".join(body).rstrip()
    if text.strip():
        yield CommentRecord(text=text, context=context.derive(line_number=anchor))

    for offset, tag_name, tag_lines in tags:
        text = "\n".join(tag_lines).rstrip()
        if text.strip():
            logger.debug(f"Collected @{tag_name} tag at line {anchor + offset}")
            yield CommentRecord(
                text=text, context=context.derive(line_number=anchor + offset)
            )


def _visit(node: Node, context: Context, docs: Tuple[Node, ...]) -> Iterator[CommentRecord]:
    declaration = unwrap(node)
    if declaration.type in CLASS_LIKE:
        class_name = NAME_RULES[declaration.type](declaration)
        if class_name:
            context = context.derive(class_name=class_name)

    if docs:
        context = context.derive(function_name=declaration_name(node))
        for doc in docs:
            yield from comment_records(doc, context)

    pending: List[Node] = []
    for child in node.children:
        if is_doc_comment(child):
            pending.append(child)
        elif child.type == "decorator":
            # decorators of class members are siblings of the member
            yield from _visit(child, context, ())
        elif not is_comment(child):
            yield from _visit(child, context, tuple(pending))
            pending = []

    # doc comments closing the file document the file itself
    if pending and node.type == "program":
        file_context = context.derive(function_name=None)
        for doc in pending:
            yield from comment_records(doc, file_context)


def collect_comments(tree: Tree, file_path: str) -> Tuple[CommentRecord, ...]:
    """All doc comment records of a parsed file, in document order."""
    records = tuple(_visit(tree.root_node, Context(file_path=file_path), ()))
    logger.debug(f"Collected {len(records)} comment records from {file_path}")
    return records
