"""Error definitions for the nested translation codec."""

from __future__ import annotations

from enum import Enum, auto
from typing import Optional


class ParseErrorKind(Enum):
    """Classifies why a nested document was rejected."""

    EMPTY_DOCUMENT = auto()
    INVALID_ROOT_SHAPE = auto()
    INVALID_LEAF_VALUE = auto()
    AMBIGUOUS_VALUE = auto()
    MISSING_VALUE = auto()
    INVALID_KEY = auto()
    DUPLICATE_TERM = auto()
    MALFORMED_DOCUMENT = auto()


class ExportErrorKind(Enum):
    """Classifies why a translation set could not be exported."""

    CONFLICT = auto()
    INVALID_TERM = auto()
    INVALID_TRANSLATION = auto()
    EMPTY_SET = auto()


class NestCodecError(Exception):
    """Base exception for all custom errors."""


class ParseError(NestCodecError):
    """Raised when a nested document cannot be turned into translations."""

    def __init__(
        self,
        kind: ParseErrorKind,
        message: str,
        line: Optional[int] = None,
    ) -> None:
        self.kind = kind
        self.message = message
        self.line = line
        location = f" (line {line})" if line is not None else ""
        super().__init__(f"{kind.name}: {message}{location}")


class ConflictingTermError(NestCodecError):
    """Raised when a term would be both a leaf and a group, or two leaves."""

    def __init__(self, term: str, message: str) -> None:
        self.term = term
        super().__init__(message)


class InvalidTermError(NestCodecError):
    """Raised when a term has an empty path segment."""

    def __init__(self, term: str) -> None:
        self.term = term
        super().__init__(f"Term '{term}' contains an empty path segment.")


class ExportError(NestCodecError):
    """Raised when a translation set cannot be rendered as nested text."""

    def __init__(self, kind: ExportErrorKind, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(f"{kind.name}: {message}")


class InterchangeError(NestCodecError):
    """Raised when an interchange payload does not have the expected shape."""


class UnsupportedFileTypeError(NestCodecError):
    """Raised when a given file extension is not supported."""


class OverwriteRefusedError(NestCodecError):
    """Raised when attempting to overwrite an output without consent."""


class ConfigurationError(NestCodecError):
    """Raised when the configuration sources are invalid."""
