from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from nuxeo_constants.app import GenerationStatus, generate_constants, probe_server
from nuxeo_constants.config import ConfigurationError, configure_logging, get_app_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from nuxeo_constants.config import AppConfig

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="nuxeo-constants",
        description="Generate Python constants from Nuxeo server metadata",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Regenerate the constants module")
    _add_common_arguments(generate)
    generate.add_argument(
        "--output",
        type=Path,
        help="Path of the generated module (defaults to config)",
    )
    generate.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if the module is outdated instead of writing it",
    )
    generate.add_argument(
        "--no-descriptions",
        action="store_true",
        help="Omit descriptive comments above each constant",
    )
    generate.add_argument(
        "--source-order",
        action="store_true",
        help="Name records in server order instead of sorting them by key first",
    )

    probe = subparsers.add_parser("probe", help="Check connectivity to the Nuxeo server")
    _add_common_arguments(probe)

    return parser.parse_args(list(argv))


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--profile",
        type=str,
        help="Configuration profile: development, staging or production (env: NUXEO_PROFILE)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    output = config.output
    if getattr(args, "output", None) is not None:
        output = dataclasses.replace(output, path=args.output)
    generation = config.generation
    if getattr(args, "no_descriptions", False):
        generation = dataclasses.replace(generation, include_descriptions=False)
    if getattr(args, "source_order", False):
        generation = dataclasses.replace(generation, canonical_order=False)
    return dataclasses.replace(config, output=output, generation=generation)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)

    try:
        config = _apply_overrides(get_app_config(profile=parsed_args.profile), parsed_args)
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(EXIT_USAGE)

    level = logging.DEBUG if parsed_args.verbose else config.log_level
    configure_logging(level=level, force=True)

    try:
        if parsed_args.command == "probe":
            reachable = probe_server(config=config)
            sys.exit(EXIT_OK if reachable else EXIT_FAILURE)

        result = generate_constants(config=config, check=parsed_args.check)
        if result.status is GenerationStatus.SKIPPED:
            log.warning("Regeneration skipped (%s); existing constants kept", result.reason)
        elif result.status is GenerationStatus.OUTDATED:
            log.error("Constants module %s is outdated", config.output.path)
            sys.exit(EXIT_FAILURE)
    except Exception:
        log.exception("Fatal error during constants generation")
        sys.exit(EXIT_FAILURE)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(EXIT_OK)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
