"""Render translation sets as canonical nested YAML text."""

from __future__ import annotations

import re
from typing import Iterable, List

import yaml

from .errors import (
    ConflictingTermError,
    ExportError,
    ExportErrorKind,
    InvalidTermError,
)
from .structures import Group, TranslationEntry
from .terms import group

STR_TAG = "tag:yaml.org,2002:str"

# Colons and template braces read as structure when left plain.
QUOTE_TRIGGER_PATTERN = re.compile(r"[:{}]")

# Read back as plain newlines unless escaped inside double quotes.
ESCAPED_BREAKS = ("\x85", "\u2028", "\u2029")


def needs_single_quotes(value: str) -> bool:
    """Return True when a scalar is always written in single quotes."""

    return bool(QUOTE_TRIGGER_PATTERN.search(value)) or value != value.strip()


class CanonicalDumper(yaml.SafeDumper):
    """SafeDumper that applies the translation file quoting convention."""


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    # Unquoted scalars that would not read back as the same string are still
    # quoted by the emitter itself.
    if any(br in value for br in ESCAPED_BREAKS):
        style = '"'
    elif needs_single_quotes(value):
        style = "'"
    else:
        style = None
    return dumper.represent_scalar(STR_TAG, value, style=style)


CanonicalDumper.add_representer(str, _represent_str)


def export(entries: Iterable[TranslationEntry]) -> str:
    """Group entries by term path and emit nested text."""

    items = list(entries)
    if not items:
        raise ExportError(ExportErrorKind.EMPTY_SET, "There are no translations to export.")
    _validate_entries(items)

    try:
        root = group(items)
    except ConflictingTermError as exc:
        raise ExportError(ExportErrorKind.CONFLICT, str(exc)) from exc
    except InvalidTermError as exc:
        raise ExportError(ExportErrorKind.INVALID_TERM, str(exc)) from exc

    return render(root)


def render(root: Group) -> str:
    """Serialize a document tree using two-space indentation and no folding."""

    return yaml.dump(
        root.to_dict(),
        Dumper=CanonicalDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=2,
        width=float("inf"),
    )


def _validate_entries(items: List[TranslationEntry]) -> None:
    for entry in items:
        if not isinstance(entry.term, str):
            raise ExportError(
                ExportErrorKind.INVALID_TERM,
                f"Term {entry.term!r} is not a string.",
            )
        if not isinstance(entry.translation, str) or entry.translation == "":
            raise ExportError(
                ExportErrorKind.INVALID_TRANSLATION,
                f"Term '{entry.term}' needs a non-empty string translation, "
                f"got {entry.translation!r}.",
            )
