"""Zipcar CLI entry points.
This module exposes datastore record operations on one archive path.
It maps argparse commands onto ZipDatastore calls.
"""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import Any, Sequence

from core.config import ZipcarConfig
from core.errors import ZipcarError, ZipcarNotFoundError
from core.logging_config import configure_logging
from store.key_codec import parse_cid, raw_cid_for
from store.zip_datastore import ZipDatastore

EXIT_OK = 0
EXIT_MISSING = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="zipcar", description="Zipcar archive datastore CLI")
    parser.add_argument("archive", help="Path to the .zcar archive (created when missing)")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_put_command(subparsers)
    _add_get_command(subparsers)
    _add_has_command(subparsers)
    _add_size_command(subparsers)
    _add_rm_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Zipcar CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = ZipcarConfig.from_env()
        configure_logging(config.log_level)
        with ZipDatastore.open(args.archive, config) as datastore:
            return _dispatch(datastore, args)
    except ZipcarNotFoundError as error:
        print(f"zipcar: {error}", file=sys.stderr)
        return EXIT_MISSING
    except ZipcarError as error:
        print(f"zipcar: {error}", file=sys.stderr)
        return EXIT_ERROR


def _dispatch(datastore: ZipDatastore, args: argparse.Namespace) -> int:
    """Route parsed arguments to a command handler."""
    if args.command == "put":
        return _run_put_command(datastore, args)
    if args.command == "get":
        return _run_get_command(datastore, args)
    if args.command == "has":
        return _run_has_command(datastore, args)
    if args.command == "size":
        return _run_size_command(datastore, args)
    if args.command == "rm":
        return _run_rm_command(datastore, args)
    raise ZipcarError(f"Unsupported command: {args.command}")


def _run_put_command(datastore: ZipDatastore, args: argparse.Namespace) -> int:
    """Handle put command.

    Args:
        datastore: Open datastore.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    payload = _read_input(args.file)
    cid = raw_cid_for(payload)
    datastore.put_cid(cid, payload)
    print(str(cid))
    return EXIT_OK


def _run_get_command(datastore: ZipDatastore, args: argparse.Namespace) -> int:
    """Handle get command, writing to stdout unless --output is set."""
    payload = datastore.get_cid(parse_cid(args.cid))
    if args.output:
        Path(args.output).write_bytes(payload)
    else:
        sys.stdout.buffer.write(payload)
        sys.stdout.flush()
    return EXIT_OK


def _run_has_command(datastore: ZipDatastore, args: argparse.Namespace) -> int:
    present = datastore.has_cid(parse_cid(args.cid))
    print("true" if present else "false")
    return EXIT_OK if present else EXIT_MISSING


def _run_size_command(datastore: ZipDatastore, args: argparse.Namespace) -> int:
    print(datastore.get_size_cid(parse_cid(args.cid)))
    return EXIT_OK


def _run_rm_command(datastore: ZipDatastore, args: argparse.Namespace) -> int:
    datastore.delete_cid(parse_cid(args.cid))
    return EXIT_OK


def _read_input(file_arg: str) -> bytes:
    """Read payload bytes from a path, or stdin for ``-``."""
    if file_arg == "-":
        return sys.stdin.buffer.read()
    try:
        return Path(file_arg).read_bytes()
    except OSError as error:
        raise ZipcarError(f"Failed to read input file {file_arg}: {error}.") from error


def _add_put_command(subparsers: Any) -> None:
    """Register put subcommand."""
    parser = subparsers.add_parser("put", help="Store a file under its raw CIDv1")
    parser.add_argument("file", help="Input file path, or - for stdin")


def _add_get_command(subparsers: Any) -> None:
    """Register get subcommand."""
    parser = subparsers.add_parser("get", help="Print a record payload")
    parser.add_argument("cid", help="Record CID")
    parser.add_argument("--output", help="Write payload to this path instead of stdout")


def _add_has_command(subparsers: Any) -> None:
    """Register has subcommand."""
    parser = subparsers.add_parser("has", help="Check whether a record exists")
    parser.add_argument("cid", help="Record CID")


def _add_size_command(subparsers: Any) -> None:
    """Register size subcommand."""
    parser = subparsers.add_parser("size", help="Print a record payload length")
    parser.add_argument("cid", help="Record CID")


def _add_rm_command(subparsers: Any) -> None:
    """Register rm subcommand."""
    parser = subparsers.add_parser("rm", help="Delete a record")
    parser.add_argument("cid", help="Record CID")
