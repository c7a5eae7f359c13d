"""
nibbl CLI Entrypoint.

This module provides the command-line interface for the nibbl front end.
It parses source code and prints the resulting syntax tree, or starts the REPL.

Features:
    - Read source from `.nibbl` files or inline strings.
    - Print the parsed program in its fully parenthesized form, or as JSON.
    - Report parse errors on stderr; optionally fail the exit code on them.
    - Guard against oversized input (`--max-size` or NIBBL_MAX_SOURCE_SIZE).
    - Launch an interactive REPL with optional verbosity.

Example usage:
    nibbl program.nibbl
    nibbl -s "let x = 1 + 2 * 3;"
    nibbl -s "-a * b" --json
    nibbl --repl --verbose

Functions:
    run_nibbl(source: str, is_string: bool = False, as_json: bool = False,
              strict: bool = False, max_size: int | None = None) -> int:
        Parses the source and prints the tree; returns the process exit code.

    main() -> None:
        Parses CLI arguments and invokes the appropriate action (REPL or parse).
"""

import argparse
import json
import os
import sys

from nibbl.nibbl_constants import MAX_SOURCE_SIZE_ENV, PROGRAM
from nibbl.nibbl_parser import parse


def max_size_from_env() -> int | None:
    raw = os.getenv(MAX_SOURCE_SIZE_ENV)
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{MAX_SOURCE_SIZE_ENV} must be an integer, got {raw!r}") from e


def run_nibbl(
    source: str,
    is_string: bool = False,
    as_json: bool = False,
    strict: bool = False,
    max_size: int | None = None,
) -> int:
    """
    Run the nibbl front end on a file or string and print the result.

    Args:
        source (str): The nibbl source code or path to a `.nibbl` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        as_json (bool): If True, prints the statements as JSON instead of source-like text.
        strict (bool): If True, parse errors make the exit code 1.
        max_size (int | None): Largest accepted source length in characters.
            Defaults to NIBBL_MAX_SOURCE_SIZE, or no limit when unset.

    Returns:
        int: The process exit code.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.nibbl',
            or if the source is longer than `max_size`.
    """
    if not is_string and not source.endswith(".nibbl"):
        raise ValueError("Only .nibbl files are supported.")
    if not is_string:
        with open(source, encoding="utf-8") as f:
            source = f.read()

    if max_size is None:
        max_size = max_size_from_env()
    if max_size is not None and len(source) > max_size:
        raise ValueError(
            f"Source is {len(source)} characters, larger than the limit of {max_size}."
        )

    program, errors = parse(source)

    for msg in errors:
        print(f"parser error: {msg}", file=sys.stderr)

    if as_json:
        print(json.dumps(program.to_dict(), indent=2))
    else:
        print(program)

    return 1 if errors and strict else 0


def main() -> None:
    """
    Entry point for the nibbl CLI.

    - Launches the REPL if no arguments are passed or `--repl` is specified.
    - Otherwise parses the given file or string and exits with `run_nibbl`'s code.
    """
    if len(sys.argv) == 1:
        from nibbl.nibbl_repl import start_repl

        start_repl()
        return
    parser = argparse.ArgumentParser(prog=PROGRAM)
    parser.add_argument("source", nargs="?", help="Filename or raw source (with -s)")
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-j", "--json", dest="as_json", action="store_true", help="Print the tree as JSON"
    )
    parser.add_argument(
        "--strict", action="store_true", help="Exit with status 1 on parse errors"
    )
    parser.add_argument(
        "--max-size",
        type=int,
        metavar="CHARS",
        help=f"Reject sources longer than this (default: ${MAX_SOURCE_SIZE_ENV})",
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch interactive REPL instead of parsing"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Verbose REPL mode (if --repl)"
    )

    args = parser.parse_args()

    if args.repl or args.source is None:
        from nibbl.nibbl_repl import start_repl

        start_repl(verbose=args.verbose)
        return

    try:
        code = run_nibbl(
            source=args.source,
            is_string=args.string,
            as_json=args.as_json,
            strict=args.strict,
            max_size=args.max_size,
        )
    except (OSError, ValueError) as e:
        parser.error(str(e))
    sys.exit(code)


if __name__ == "__main__" and not any("pytest" in arg for arg in sys.argv):
    main()
