"""The ``{"translations": [...]}`` shape exchanged with other tools."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from .errors import InterchangeError
from .structures import TranslationEntry, TranslationSet

TRANSLATIONS_KEY = "translations"


def to_interchange(entries: TranslationSet) -> Dict[str, List[Dict[str, str]]]:
    return {
        TRANSLATIONS_KEY: [
            {"term": entry.term, "translation": entry.translation}
            for entry in entries
        ]
    }


def from_interchange(payload: Any) -> TranslationSet:
    """Validate an interchange payload and return its entries in order."""

    if not isinstance(payload, dict) or TRANSLATIONS_KEY not in payload:
        raise InterchangeError(
            "Expected an object with a 'translations' list at the root."
        )
    items = payload[TRANSLATIONS_KEY]
    if not isinstance(items, list):
        raise InterchangeError("'translations' must be a list.")

    entries: TranslationSet = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise InterchangeError(f"Translation #{index + 1} must be an object.")
        term = item.get("term")
        translation = item.get("translation")
        if not isinstance(term, str) or not term:
            raise InterchangeError(
                f"Translation #{index + 1} needs a non-empty string 'term'."
            )
        if not isinstance(translation, str):
            raise InterchangeError(
                f"Translation #{index + 1} ('{term}') needs a string 'translation'."
            )
        entries.append(TranslationEntry(term=term, translation=translation))
    return entries


def dumps(entries: TranslationSet, *, indent: int = 2) -> str:
    return json.dumps(to_interchange(entries), indent=indent or None, ensure_ascii=False) + "\n"


def loads(text: str) -> TranslationSet:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InterchangeError(
            f"Invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}"
        ) from exc
    return from_interchange(payload)
