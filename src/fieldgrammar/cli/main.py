"""Main CLI entry point for fieldgrammar."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .. import __version__
from ..defaults import default_data
from ..exceptions import FieldGrammarError
from ..models.schema import load_schema
from ..tokens.transport import TokenFormat, decode_token, encode_token
from .analyze import analyze_file

FORMATS = {"bitpacked": TokenFormat.BITPACKED, "compressed": TokenFormat.COMPRESSED}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fieldgrammar",
        description="fieldgrammar: Field Grammar Schema Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  fieldgrammar --encode schema.json                      Encode to a compressed token
  fieldgrammar --encode schema.json --format bitpacked   Encode to a bit-packed token
  fieldgrammar --decode TOKEN                            Print the schema JSON
  fieldgrammar --defaults schema.json                    Print default data
  fieldgrammar --analyze schema.json                     Show field and token sizes
        """,
    )

    actions = parser.add_mutually_exclusive_group()
    actions.add_argument(
        "--encode",
        metavar="FILE",
        type=str,
        help="Encode a JSON schema file to a schema token",
    )
    actions.add_argument(
        "--decode",
        metavar="TOKEN",
        type=str,
        help="Decode a schema token and print the schema JSON",
    )
    actions.add_argument(
        "--defaults",
        metavar="FILE",
        type=str,
        help="Print the default data for a JSON schema file",
    )
    actions.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Analyze a JSON schema file and show field and token sizes",
    )

    parser.add_argument(
        "--format",
        choices=sorted(FORMATS),
        default="compressed",
        help="Token format for --encode (default: compressed)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"fieldgrammar {__version__}",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the fieldgrammar CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    file_arg = args.encode or args.defaults or args.analyze
    if file_arg and not Path(file_arg).exists():
        print(f"Error: File not found: {file_arg}", file=sys.stderr)
        return 1

    try:
        if args.encode:
            schema = load_schema(args.encode)
            token = asyncio.run(encode_token(schema.name, schema.fields, FORMATS[args.format]))
            print(token)
            return 0

        if args.decode:
            schema = asyncio.run(decode_token(args.decode))
            print(schema.to_json())
            return 0

        if args.defaults:
            print(json.dumps(default_data(load_schema(args.defaults)), indent=2))
            return 0

        if args.analyze:
            analyze_file(Path(args.analyze))
            return 0
    except FieldGrammarError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
