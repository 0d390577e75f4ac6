"""Mews CLI — mews build.

Entry point for the ``mews`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the mews CLI."""
    parser = argparse.ArgumentParser(
        prog="mews",
        description="Static-site build pipeline with sandboxed build scripts.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # mews build
    build_parser = subparsers.add_parser(
        "build",
        help="Compile the project into its output directory",
    )
    build_parser.add_argument("root", nargs="?", default=".", help="Project root directory")
    build_parser.add_argument(
        "--output", default=None, help="Output directory (overrides config.json 'out')",
    )
    build_parser.add_argument(
        "--entry", default=None, help="Entry file (overrides config.json 'src')",
    )
    build_parser.add_argument(
        "--no-write", action="store_true", help="Compile everything but write nothing",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from mews import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from mews._errors import MewsError
    from mews.app import build

    if args.command == "build":
        try:
            build(
                root=args.root,
                output=args.output,
                entry=args.entry,
                write=not args.no_write,
            )
        except MewsError as exc:
            print(f"mews: {exc}", file=sys.stderr)
            sys.exit(1)


if __name__ == "__main__":
    main()
