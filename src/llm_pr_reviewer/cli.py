#!/usr/bin/env python3
"""CLI entry point - runs one review pass for the configured pull request."""

import argparse
import asyncio
import logging
import sys
from typing import Mapping, Optional, Sequence

from .config import AppConfig, setup_logging
from .exceptions import ConfigError, TransportError
from .pipeline import ReviewPipeline


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="llm-pr-reviewer",
        description="Review a GitHub pull request with a language model and post the results.",
    )
    parser.add_argument(
        "--config",
        help="YAML configuration file (default: read environment variables)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    return parser


def load_config(args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Load and validate configuration.

    Raises:
        ConfigError: If required values are missing or invalid
    """
    if args.config:
        config = AppConfig.from_yaml(args.config)
    else:
        config = AppConfig.from_env(environ)

    if args.log_level:
        config.logging.level = args.log_level

    config.validate()
    return config


def main(argv: Optional[Sequence[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    """Run the review and return the process exit status."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args, environ)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logging(config.logging)

    try:
        result = asyncio.run(ReviewPipeline.from_config(config).run())
    except TransportError as e:
        logger.error(f"Review failed: {e}")
        return 1

    print(
        f"Reviewed {result.repository}#{result.pr_number}: "
        f"{len(result.comments)} line comments, summary posted"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
