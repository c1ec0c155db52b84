"""Parse nested YAML translation documents into ordered translation sets.

The generic YAML loader accepts far more than a translation file may hold, so
the text is only composed into YAML nodes and every node is then checked
explicitly while the document tree is built:

* the root must be a mapping,
* keys must be non-empty scalars,
* values are either nested mappings or non-empty string scalars,
* a scalar is never reinterpreted as a deeper ``key: value`` pair,
* aliases are rejected, so no node is walked twice.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Set

import yaml
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

from .errors import ParseError, ParseErrorKind
from .structures import DocumentNode, Group, Leaf, TranslationSet
from .terms import flatten, join_term

STR_TAG = "tag:yaml.org,2002:str"
NULL_TAG = "tag:yaml.org,2002:null"
MERGE_TAG = "tag:yaml.org,2002:merge"

# PyYAML error texts that map onto specific failure kinds.
_AMBIGUOUS_PROBLEMS = ("mapping values are not allowed here",)
_MISSING_VALUE_PROBLEMS = ("could not find expected ':'",)
_MULTI_DOCUMENT_CONTEXTS = ("expected a single document in the stream",)


def parse(text: str) -> TranslationSet:
    """Parse nested translation text into entries in document order."""

    if not text or not text.strip():
        raise ParseError(ParseErrorKind.EMPTY_DOCUMENT, "The document is empty.")

    root_node = _compose(text)
    if root_node is None or _is_empty_scalar(root_node):
        raise ParseError(
            ParseErrorKind.EMPTY_DOCUMENT,
            "The document contains no translations.",
        )
    if not isinstance(root_node, MappingNode):
        raise ParseError(
            ParseErrorKind.INVALID_ROOT_SHAPE,
            "Expected a mapping of terms at the root of the document.",
            _line_of(root_node),
        )

    if not root_node.value:
        raise ParseError(
            ParseErrorKind.EMPTY_DOCUMENT,
            "The document contains no translations.",
            _line_of(root_node),
        )

    root = _build_group(root_node, [], {}, {id(root_node)})
    return flatten(root)


def _compose(text: str) -> Optional[Node]:
    try:
        return yaml.compose(text, Loader=yaml.SafeLoader)
    except yaml.MarkedYAMLError as exc:
        raise _classify_yaml_error(exc) from exc
    except yaml.YAMLError as exc:
        raise ParseError(ParseErrorKind.MALFORMED_DOCUMENT, str(exc)) from exc


def _classify_yaml_error(exc: yaml.MarkedYAMLError) -> ParseError:
    problem = exc.problem or ""
    mark = exc.problem_mark or exc.context_mark
    line = mark.line + 1 if mark is not None else None

    if problem in _AMBIGUOUS_PROBLEMS:
        return ParseError(
            ParseErrorKind.AMBIGUOUS_VALUE,
            "A value contains a nested 'key: value' pair; quote the value instead.",
            line,
        )
    if problem in _MISSING_VALUE_PROBLEMS:
        # The context mark points at the stray line below the dangling key.
        if exc.context_mark is not None:
            line = exc.context_mark.line + 1
        return ParseError(
            ParseErrorKind.MISSING_VALUE,
            "A key is followed by a line that is neither a value nor a nested key.",
            line,
        )
    if exc.context in _MULTI_DOCUMENT_CONTEXTS:
        return ParseError(
            ParseErrorKind.INVALID_ROOT_SHAPE,
            "Expected a single document.",
            line,
        )
    return ParseError(ParseErrorKind.MALFORMED_DOCUMENT, problem or str(exc), line)


def _build_group(
    node: MappingNode,
    prefix: List[str],
    seen: Dict[str, int],
    walked: Set[int],
) -> Group:
    children = []
    for key_node, value_node in node.value:
        _mark_walked(key_node, walked)
        _mark_walked(value_node, walked)
        segment = _key_text(key_node)
        path = prefix + [segment]
        child = _build_child(value_node, path, seen, walked)
        if isinstance(child, Leaf):
            _remember_term(join_term(path), key_node, seen)
        children.append((segment, child))
    return Group(tuple(children))


def _build_child(
    node: Node,
    path: List[str],
    seen: Dict[str, int],
    walked: Set[int],
) -> DocumentNode:
    term = join_term(path)
    if isinstance(node, MappingNode):
        if not node.value:
            raise ParseError(
                ParseErrorKind.MISSING_VALUE,
                f"Term '{term}' has no value.",
                _line_of(node),
            )
        return _build_group(node, path, seen, walked)

    if isinstance(node, SequenceNode):
        raise ParseError(
            ParseErrorKind.INVALID_LEAF_VALUE,
            f"Term '{term}' holds a list; translations must be strings.",
            _line_of(node),
        )

    if _is_empty_scalar(node):
        raise ParseError(
            ParseErrorKind.MISSING_VALUE,
            f"Term '{term}' has no value.",
            _line_of(node),
        )
    if node.tag != STR_TAG:
        raise ParseError(
            ParseErrorKind.INVALID_LEAF_VALUE,
            f"Term '{term}' holds '{node.value}', which is not a string "
            f"({_tag_name(node.tag)}).",
            _line_of(node),
        )
    if node.value == "":
        raise ParseError(
            ParseErrorKind.INVALID_LEAF_VALUE,
            f"Term '{term}' holds an empty string.",
            _line_of(node),
        )
    return Leaf(node.value)


def _key_text(node: Node) -> str:
    if not isinstance(node, ScalarNode):
        raise ParseError(
            ParseErrorKind.INVALID_KEY,
            "Keys must be plain text, not lists or mappings.",
            _line_of(node),
        )
    if node.tag == MERGE_TAG:
        raise ParseError(
            ParseErrorKind.INVALID_KEY,
            "Merge keys ('<<') are not supported in translation files.",
            _line_of(node),
        )
    if node.value == "":
        raise ParseError(ParseErrorKind.INVALID_KEY, "Empty key.", _line_of(node))
    return node.value


def _mark_walked(node: Node, walked: Set[int]) -> None:
    # An alias composes to the very node object its anchor produced.
    if id(node) in walked:
        raise ParseError(
            ParseErrorKind.MALFORMED_DOCUMENT,
            "Aliases (*name) are not supported in translation files.",
            _line_of(node),
        )
    walked.add(id(node))


def _remember_term(term: str, key_node: Node, seen: Dict[str, int]) -> None:
    line = _line_of(key_node)
    if term in seen:
        raise ParseError(
            ParseErrorKind.DUPLICATE_TERM,
            f"Term '{term}' is already defined on line {seen[term]}.",
            line,
        )
    seen[term] = line


def _is_empty_scalar(node: Node) -> bool:
    # A key written with nothing after it composes to a plain, empty null.
    return (
        isinstance(node, ScalarNode)
        and node.tag == NULL_TAG
        and node.value == ""
        and node.style is None
    )


def _tag_name(tag: str) -> str:
    return tag.rsplit(":", 1)[-1] if tag.startswith("tag:yaml.org,2002:") else tag


def _line_of(node: Node) -> int:
    return node.start_mark.line + 1
