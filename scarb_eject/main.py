"""Main CLI entry point for scarb-eject.

Generates a ``cairo_project.toml`` for a Scarb package so the package can be
built with the bare Cairo compiler.
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from scarb_eject import __version__
from scarb_eject.cli.eject import eject_command

logger = logging.getLogger("scarb_eject.cli")


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> None:
    """Setup logging configuration with Rich integration.

    Logs go to stderr so that ``--output -`` leaves stdout to the descriptor.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )

    logging.basicConfig(
        level=level,
        format="[%(name)s] %(message)s",
        handlers=[handler],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scarb-eject",
        description=(
            "scarb-eject - generate cairo_project.toml for a Scarb package"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="PATH",
        help=(
            "Path to cairo_project.toml file to overwrite. Defaults to next to "
            "Scarb.toml for this workspace. Use `-` to write to standard output."
        ),
    )
    parser.add_argument(
        "-p",
        "--package",
        metavar="SPEC",
        help=(
            "Package to eject, by name or package id. Defaults to the only "
            "workspace member."
        ),
    )
    parser.add_argument(
        "--no-deps",
        action="store_true",
        help="Do not write the [config.global.dependencies] table",
    )
    parser.add_argument(
        "--absolute-paths",
        action="store_true",
        help="Write absolute crate roots even when writing to a file",
    )
    parser.add_argument(
        "--manifest-path",
        metavar="PATH",
        help="Path to Scarb.toml, forwarded to `scarb metadata`",
    )
    parser.add_argument(
        "--metadata",
        metavar="PATH",
        help=(
            "Read a saved `scarb metadata --format-version 1` JSON document "
            "instead of running scarb"
        ),
    )
    parser.add_argument(
        "-c",
        "--config",
        help=(
            "Optional eject configuration. Can be a path to a TOML/JSON file "
            "or an inline TOML/JSON string. When omitted, built-in defaults "
            "are used."
        ),
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    return eject_command(args)


if __name__ == "__main__":
    sys.exit(main())
