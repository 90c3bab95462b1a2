"""Command line interface for Sunvoy tools."""

import logging
import os
import sys
import tomllib
from argparse import ArgumentParser, Namespace
from pathlib import Path

from .export import DEFAULT_OUTPUT_FILE, run_export
from .session import SunvoySession

CONFIG_PATH = "~/.config/sunvoy-export/config.toml"


def export_users_cli():
    """Entry point for exporting Sunvoy users to a JSON file."""
    args = parse_export_users_arguments()
    config_logging(args)

    output_path = resolve_output_path(args)
    cookie_file = args.cookie_file or os.environ.get("SUNVOY_COOKIE_FILE")

    with SunvoySession(cookie_file) as session:
        result = run_export(session, output_path)
        if args.verbose:
            session.print_cookies()

    sys.exit(0 if result.ok else 1)


def parse_export_users_arguments(argv=None) -> Namespace:
    """Parse command line arguments for sunvoy-export."""
    parser = make_parser("Export Sunvoy users and the current user to JSON")
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file. "
        "Resolution order: 1. --output "
        "2. $SUNVOY_OUTPUT "
        "3. config file "
        f"4. {DEFAULT_OUTPUT_FILE} in the current directory",
    )
    parser.add_argument(
        "--cookie-file",
        metavar="FILE",
        help="Keep session cookies in FILE between runs "
        "(default: $SUNVOY_COOKIE_FILE, else in memory only)",
    )
    return parser.parse_args(argv)


def resolve_output_path(args) -> Path:
    """Resolve output file using resolution order from args."""
    # 1. Command-line option
    if args.output:
        return Path(args.output).expanduser()

    # 2. Environment variable
    env_output = os.environ.get("SUNVOY_OUTPUT")
    if env_output:
        return Path(env_output).expanduser()

    # 3. Config file
    config_path = Path(CONFIG_PATH).expanduser()
    if config_path.exists():
        with open(config_path, "rb") as f:
            config = tomllib.load(f)
        output = config.get("output")
        if output:
            return Path(output).expanduser()

    # 4. Fallback = current working directory
    return Path.cwd() / DEFAULT_OUTPUT_FILE


def make_parser(description: str) -> ArgumentParser:
    parser = ArgumentParser(description=description)
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="Suppress INFO and below messages"
    )
    return parser


def config_logging(args) -> None:
    """Configure logging based on command line arguments."""
    if args.quiet:
        log_level = logging.WARNING
    elif args.verbose:
        log_level = logging.DEBUG
    else:
        log_level = logging.INFO

    logging.basicConfig(
        level=log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


if __name__ == "__main__":
    export_users_cli()
