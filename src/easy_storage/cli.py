from __future__ import annotations

"""
Command-line interface for easy_storage.

This module provides a thin CLI layer around :mod:`easy_storage.api`.
Files are handled as plain tables, no record type is involved.

Typical usage
-------------

Check that a file decodes:

    easy-storage check settings.toml

Convert between formats (inferred from the extensions):

    easy-storage convert settings.json settings.toml

Print a file as JSON:

    easy-storage show settings.toml --format toml

Notes
-----
- Errors are printed as ``error: <message>`` on stderr with exit code 1.
"""

import argparse
import logging
import sys
from typing import Any, Dict, Optional, Tuple

from .api import dumps, load, save
from .config import StoreOptions, load_options
from .exceptions import StorageError
from .formats import Format, path_to_format

logger = logging.getLogger(__name__)

_FORMAT_CHOICES = [f.value for f in Format]


def _resolve_format(path: str, explicit: Optional[str]) -> Format:
    if explicit:
        return Format(explicit)
    return path_to_format(path)


def _load_table(path: str, explicit: Optional[str]) -> Tuple[Format, Dict[str, Any]]:
    fmt = _resolve_format(path, explicit)
    return fmt, load(dict, path, fmt)


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_check(args: argparse.Namespace, options: StoreOptions) -> int:
    """
    Decode a file and report its format.
    """
    fmt, data = _load_table(args.path, args.format)
    logger.debug("%s holds %d top-level key(s)", args.path, len(data))
    print(f"ok: {args.path} ({fmt})")
    return 0


def _cmd_convert(args: argparse.Namespace, options: StoreOptions) -> int:
    """
    Load SRC and save it to DEST, possibly in another format.
    """
    # Both formats are resolved up front so a bad DEST extension fails before reading.
    src_fmt = _resolve_format(args.src, args.from_format)
    dest_fmt = _resolve_format(args.dest, args.to_format)

    data = load(dict, args.src, src_fmt)
    save(data, args.dest, not args.no_create, dest_fmt, options=options)
    logger.info("converted %s (%s) -> %s (%s)", args.src, src_fmt, args.dest, dest_fmt)
    print(args.dest)
    return 0


def _cmd_show(args: argparse.Namespace, options: StoreOptions) -> int:
    """
    Print the decoded content of a file as pretty JSON.
    """
    _, data = _load_table(args.path, args.format)
    print(dumps(data, Format.JSON, options=options))
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="easy-storage",
        description="Inspect and convert JSON / TOML files.",
    )
    parser.add_argument(
        "--options",
        type=str,
        default=None,
        help="Path to a JSON or TOML file with encoder options.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # check
    p_check = subparsers.add_parser("check", help="Check that a file decodes.")
    p_check.add_argument("path", type=str, help="File to check.")
    p_check.add_argument(
        "--format",
        type=str,
        default=None,
        choices=_FORMAT_CHOICES,
        help="Format of the file (default: inferred from the extension).",
    )
    p_check.set_defaults(func=_cmd_check)

    # convert
    p_convert = subparsers.add_parser("convert", help="Convert a file to another format.")
    p_convert.add_argument("src", type=str, help="Source file.")
    p_convert.add_argument("dest", type=str, help="Destination file (truncated if present).")
    p_convert.add_argument(
        "--from",
        dest="from_format",
        type=str,
        default=None,
        choices=_FORMAT_CHOICES,
        help="Format of SRC (default: inferred from the extension).",
    )
    p_convert.add_argument(
        "--to",
        dest="to_format",
        type=str,
        default=None,
        choices=_FORMAT_CHOICES,
        help="Format of DEST (default: inferred from the extension).",
    )
    p_convert.add_argument(
        "--no-create",
        action="store_true",
        help="Fail instead of creating DEST when it does not exist.",
    )
    p_convert.set_defaults(func=_cmd_convert)

    # show
    p_show = subparsers.add_parser("show", help="Print a file as JSON.")
    p_show.add_argument("path", type=str, help="File to show.")
    p_show.add_argument(
        "--format",
        type=str,
        default=None,
        choices=_FORMAT_CHOICES,
        help="Format of the file (default: inferred from the extension).",
    )
    p_show.set_defaults(func=_cmd_show)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    CLI entry point.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        options = load_options(args.options)
        return args.func(args, options)
    except StorageError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
