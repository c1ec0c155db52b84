"""Core data structures for the nested translation codec."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple, Union


@dataclass(frozen=True)
class TranslationEntry:
    """A single term and its translated text."""

    term: str
    translation: str


TranslationSet = List[TranslationEntry]


@dataclass(frozen=True)
class Leaf:
    """Terminal string value in a nested document."""

    value: str


@dataclass(frozen=True)
class Group:
    """Ordered mapping of path segments to child nodes."""

    children: Tuple[Tuple[str, "DocumentNode"], ...] = ()

    def items(self) -> Iterator[Tuple[str, "DocumentNode"]]:
        return iter(self.children)

    def keys(self) -> List[str]:
        return [segment for segment, _ in self.children]

    def __len__(self) -> int:
        return len(self.children)

    def to_dict(self) -> dict:
        """Return plain nested dicts, keeping child order."""

        result: dict = {}
        for segment, node in self.children:
            if isinstance(node, Group):
                result[segment] = node.to_dict()
            else:
                result[segment] = node.value
        return result


DocumentNode = Union[Leaf, Group]
