"""Flattening and grouping between nested documents and dotted terms."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Union

from .errors import ConflictingTermError, InvalidTermError
from .structures import Group, Leaf, TranslationEntry, TranslationSet

TERM_SEPARATOR = "."

_Branch = Dict[str, Union[str, "_Branch"]]


def join_term(segments: Sequence[str]) -> str:
    """Render a term path as its external dotted identifier."""

    return TERM_SEPARATOR.join(segments)


def split_term(term: str) -> List[str]:
    """Split a dotted term into path segments, rejecting empty segments."""

    segments = term.split(TERM_SEPARATOR)
    if any(segment == "" for segment in segments):
        raise InvalidTermError(term)
    return segments


def flatten(root: Group) -> TranslationSet:
    """Walk a document depth-first and emit one entry per leaf."""

    entries: TranslationSet = []
    _flatten_into(root, [], entries)
    return entries


def _flatten_into(node: Group, prefix: List[str], entries: TranslationSet) -> None:
    for segment, child in node.items():
        path = prefix + [segment]
        if isinstance(child, Group):
            _flatten_into(child, path, entries)
        else:
            entries.append(TranslationEntry(term=join_term(path), translation=child.value))


def group(entries: Iterable[TranslationEntry]) -> Group:
    """Rebuild a nested document from entries, keeping first-seen order.

    Raises ConflictingTermError when a path would need to be both a leaf and a
    group, or when one term carries two different translations. Repeating an
    identical entry is harmless.
    """

    root: _Branch = {}
    for entry in entries:
        segments = split_term(entry.term)
        branch = root
        for depth, segment in enumerate(segments[:-1]):
            if segment not in branch:
                branch[segment] = {}
            child = branch[segment]
            if not isinstance(child, dict):
                owner = join_term(segments[: depth + 1])
                raise ConflictingTermError(
                    entry.term,
                    f"Term '{entry.term}' nests under '{owner}', "
                    "which already holds a translation.",
                )
            branch = child

        last = segments[-1]
        existing = branch.get(last)
        if existing is None:
            branch[last] = entry.translation
        elif isinstance(existing, dict):
            raise ConflictingTermError(
                entry.term,
                f"Term '{entry.term}' is already a group of nested terms.",
            )
        elif existing != entry.translation:
            raise ConflictingTermError(
                entry.term,
                f"Term '{entry.term}' is defined twice with different translations.",
            )
    return _freeze(root)


def _freeze(branch: _Branch) -> Group:
    children = []
    for segment, value in branch.items():
        if isinstance(value, dict):
            children.append((segment, _freeze(value)))
        else:
            children.append((segment, Leaf(value)))
    return Group(tuple(children))
