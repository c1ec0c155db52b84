"""High-level orchestration for converting translation files."""

from __future__ import annotations

import pathlib
import sys
import time
from dataclasses import dataclass
from typing import Literal

from .errors import NestCodecError, OverwriteRefusedError, UnsupportedFileTypeError
from .exporter import export
from .interchange import dumps, loads
from .parser import parse

Mode = Literal["parse", "export"]

NESTED_SUFFIXES = {".yaml", ".yml"}
INTERCHANGE_SUFFIXES = {".json"}


@dataclass
class ConversionSummary:
    """Report returned after converting a file."""

    input_path: pathlib.Path
    output_path: pathlib.Path
    mode: Mode
    total_terms: int
    nested_terms: int
    input_bytes: int
    output_bytes: int
    elapsed_seconds: float


def detect_mode(path: pathlib.Path) -> Mode:
    """Infer the conversion direction from the input file suffix."""

    suffix = path.suffix.lower()
    if suffix in NESTED_SUFFIXES:
        return "parse"
    if suffix in INTERCHANGE_SUFFIXES:
        return "export"
    raise UnsupportedFileTypeError(
        "This file type isn't supported. Use .yaml/.yml to parse or .json to export."
    )


def derive_output_path(input_path: pathlib.Path, mode: Mode) -> pathlib.Path:
    suffix = ".json" if mode == "parse" else ".yaml"
    return input_path.with_suffix(suffix)


class ConversionRunner:
    """Reads one file, converts it in the requested direction and writes it."""

    def __init__(
        self,
        *,
        input_path: pathlib.Path,
        output_path: pathlib.Path,
        mode: Mode,
        encoding: str = "utf-8",
        json_indent: int = 2,
        verbose: bool = False,
        debug: bool = False,
    ) -> None:
        self.input_path = input_path
        self.output_path = output_path
        self.mode = mode
        self.encoding = encoding
        self.json_indent = json_indent
        self.verbose = verbose
        self.debug = debug

    def run(self) -> ConversionSummary:
        start_time = time.time()

        source = self.input_path.read_text(encoding=self.encoding)
        self._log_debug("input.path", str(self.input_path))
        self._log_debug("input.chars", str(len(source)))

        if self.mode == "parse":
            entries = parse(source)
            rendered = dumps(entries, indent=self.json_indent)
        else:
            entries = loads(source)
            rendered = export(entries)

        if self.verbose:
            print(f"Converted {len(entries)} terms ({self.mode}).")
        self._log_debug("output.rendered", rendered)

        self.output_path.write_text(rendered, encoding=self.encoding)

        elapsed = time.time() - start_time
        return ConversionSummary(
            input_path=self.input_path,
            output_path=self.output_path,
            mode=self.mode,
            total_terms=len(entries),
            nested_terms=sum(1 for entry in entries if "." in entry.term),
            input_bytes=len(source.encode(self.encoding)),
            output_bytes=len(rendered.encode(self.encoding)),
            elapsed_seconds=elapsed,
        )

    def _log_debug(self, label: str, message: str) -> None:
        """Emit debug information when enabled."""

        if not self.debug:
            return
        print(f"[nestcodec][debug] {label}:\n{message}", file=sys.stderr)


def validate_paths(
    input_path: pathlib.Path,
    output_path: pathlib.Path,
    force_overwrite: bool,
) -> None:
    """Validate input/output path combinations and overwrite policy."""

    if not input_path.exists():
        raise FileNotFoundError(
            f"Input file not found: {input_path}"
        )
    if not input_path.is_file():
        raise NestCodecError("Input path must be a file.")

    if input_path.resolve() == output_path.resolve():
        raise OverwriteRefusedError(
            "The output path matches the input file. Refusing to overwrite the source file."
        )

    if output_path.exists() and not force_overwrite:
        raise OverwriteRefusedError(
            "The output file already exists. Rename it or use --force."
        )
