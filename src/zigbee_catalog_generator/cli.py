"""Command line interface for device catalog generation."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys
from typing import NoReturn, Optional

from .config import CatalogConfig, ConfigError, load_catalog_config
from .generator import CollectionError, SourceError, run_catalog
from .writer import (
    WriteError,
    close_output,
    commit_output,
    open_output,
    write_document,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_COLLECTION_FAILED = 1
EXIT_SETUP_FAILED = 2
EXIT_USAGE = 3


class _CatalogArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = _CatalogArgumentParser(
        prog="zigbee-device-catalog",
        description="Generate the HOMEd supported ZigBee device list as Markdown",
    )
    parser.add_argument(
        "-f",
        dest="output",
        metavar="FILE",
        help="Write the catalog to FILE instead of the console",
    )
    parser.add_argument(
        "-d",
        dest="directory",
        metavar="DIR",
        help="Collect category files from DIR instead of the upstream repository",
    )
    parser.add_argument(
        "-c",
        dest="config",
        metavar="CONFIG",
        help="YAML file overriding aliases, URLs or header texts",
    )
    parser.add_argument("-v", dest="verbose", action="store_true", help="Enable debug logging")
    return parser


def configure_logging(*, verbose: bool) -> None:
    """Send package diagnostics to standard error."""
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger = logging.getLogger(__package__)
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def main(argv: Optional[list[str]] = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=bool(args.verbose))

    try:
        config = load_catalog_config(Path(args.config)) if args.config else CatalogConfig()
    except ConfigError as exc:
        logger.error("%s", exc)
        return EXIT_SETUP_FAILED

    output_path = Path(args.output) if args.output else None
    try:
        stream = open_output(output_path)
    except WriteError:
        logger.error("Couldn't create file %s", args.output)
        return EXIT_SETUP_FAILED

    try:
        try:
            run = run_catalog(
                config=config,
                directory=Path(args.directory) if args.directory else None,
            )
        except (CollectionError, SourceError) as exc:
            logger.error("%s", exc)
            logger.error("Couldn't collect data.")
            return EXIT_COLLECTION_FAILED
        write_document(stream, run.document)
        commit_output(stream, output_path)
    except WriteError as exc:
        logger.error("%s", exc)
        return EXIT_SETUP_FAILED
    finally:
        close_output(stream)

    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
