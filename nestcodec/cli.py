"""Command line interface for nestcodec."""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Iterable, Optional

from .configuration import get_settings
from .converter import (
    ConversionRunner,
    ConversionSummary,
    derive_output_path,
    detect_mode,
    validate_paths,
)
from .errors import (
    ConfigurationError,
    ExportError,
    InterchangeError,
    NestCodecError,
    OverwriteRefusedError,
    ParseError,
    UnsupportedFileTypeError,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nestcodec",
        description=(
            "Convert nested YAML translation files to flat term lists (JSON) and back."
        ),
    )
    parser.add_argument(
        "input_file",
        help="Path to a .yaml/.yml file to parse or a .json file to export.",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Output file path. Defaults to the input path with the other suffix.",
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=("parse", "export"),
        help="Conversion direction. Inferred from the input suffix when omitted.",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Allow overwriting the output file if it already exists.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show detailed progress information.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print the converted content and file details to stderr.",
    )
    return parser


def execute_conversion(
    *,
    input_file: str,
    output_file: str | None,
    mode: str | None,
    force_overwrite: bool,
    verbose: bool,
    debug: bool,
    encoding: str = "utf-8",
    json_indent: int = 2,
) -> tuple[int, ConversionSummary | None, str | None]:
    """Execute a conversion and return the exit code, summary, and message."""

    input_path = pathlib.Path(input_file).expanduser().resolve()
    try:
        resolved_mode = mode or detect_mode(input_path)
    except UnsupportedFileTypeError as exc:
        return 1, None, str(exc)

    output_path = (
        pathlib.Path(output_file).expanduser().resolve()
        if output_file
        else derive_output_path(input_path, resolved_mode)
    )

    try:
        validate_paths(input_path, output_path, force_overwrite=force_overwrite)
    except FileNotFoundError as exc:
        return 1, None, str(exc)
    except OverwriteRefusedError as exc:
        return 1, None, str(exc)
    except NestCodecError as exc:
        return 1, None, str(exc)

    output_path.parent.mkdir(parents=True, exist_ok=True)

    runner = ConversionRunner(
        input_path=input_path,
        output_path=output_path,
        mode=resolved_mode,
        encoding=encoding,
        json_indent=json_indent,
        verbose=verbose,
        debug=debug,
    )

    try:
        summary = runner.run()
    except ParseError as exc:
        return 1, None, f"Could not parse {input_path.name}: {exc}"
    except (ExportError, InterchangeError) as exc:
        return 1, None, f"Could not export {input_path.name}: {exc}"
    except NestCodecError as exc:
        return 1, None, str(exc)
    except (OSError, UnicodeError) as exc:
        return 1, None, f"Could not read or write files: {exc}"
    except KeyboardInterrupt:
        return 2, None, "Conversion interrupted by user."

    return 0, summary, None


def print_summary(summary: ConversionSummary) -> None:
    """Output a short report once processing completes."""

    print("\nConversion complete.")
    print(f"  Input file:    {summary.input_path}")
    print(f"  Output file:   {summary.output_path}")
    print(f"  Mode:          {summary.mode}")
    print(
        f"  Terms:         {summary.total_terms} "
        f"({summary.nested_terms} nested)"
    )
    print(f"  Size:          {summary.input_bytes} -> {summary.output_bytes} bytes")
    print(f"  Elapsed time:  {summary.elapsed_seconds:.2f} seconds")


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(exc)
        return 1

    exit_code, summary, message = execute_conversion(
        input_file=args.input_file,
        output_file=args.output,
        mode=args.mode,
        force_overwrite=args.force,
        verbose=args.verbose,
        debug=bool(args.debug or settings.NESTCODEC_DEBUG),
        encoding=settings.NESTCODEC_ENCODING,
        json_indent=settings.NESTCODEC_JSON_INDENT,
    )

    if message:
        print(message)
    if summary:
        print_summary(summary)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
