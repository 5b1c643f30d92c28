"""structy: pretty-print JSON and logfmt structured log lines from stdin."""

import logging
import sys
from argparse import ArgumentParser, ArgumentTypeError
from typing import TextIO

from structy.config import Config, load_config_kwargs
from structy.renderer import Formatter

VERSION = "v0.3.0"

logger = logging.getLogger("structy")


def _positive_int(value: str) -> int:
    try:
        depth = int(value)
    except ValueError:
        raise ArgumentTypeError(f"invalid depth: {value!r}")
    if depth < 1:
        raise ArgumentTypeError(f"depth must be >= 1, got {depth}")
    return depth


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="structy",
        description="JSON structured logging parser",
    )
    parser.add_argument(
        "-n", "--no-colors",
        action="store_true",
        default=None,
        help="Disable colorization",
    )
    parser.add_argument(
        "-l", "--no-level",
        action="store_true",
        default=None,
        help="Disable log level highlighting",
    )
    parser.add_argument(
        "-d", "--parse-depth",
        type=_positive_int,
        help="Number of levels deep to parse JSON (default: 1)",
    )
    parser.add_argument(
        "-t", "--timestamp-prop",
        help="Property to use as a timestamp (default: time, then timestamp)",
    )
    parser.add_argument(
        "-H", "--highlight-props",
        nargs="+",
        metavar="PROP",
        help="Properties to highlight",
    )
    parser.add_argument(
        "-c", "--config",
        help="YAML config file (default: $STRUCTY_CONFIG)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug details to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"structy {VERSION}",
    )
    return parser


def config_from_args(args) -> Config:
    """Layer CLI flags on top of the file/env configuration."""
    kwargs = load_config_kwargs(args.config)
    if args.no_colors:
        kwargs["disable_colors"] = True
    if args.no_level:
        kwargs["disable_level"] = True
    if args.parse_depth is not None:
        kwargs["parse_depth"] = args.parse_depth
    if args.timestamp_prop is not None:
        kwargs["timestamp_field"] = args.timestamp_prop
    if args.highlight_props:
        kwargs["highlight_fields"] = frozenset(args.highlight_props)
    return Config(**kwargs)


def run(config: Config, stdin: TextIO, stdout: TextIO) -> int:
    """Reformat every line of *stdin*; unparseable lines are echoed as-is."""
    formatter = Formatter(config)
    for line in stdin:
        stripped = line.rstrip("\r\n")
        print(formatter.reformat_or_raw(stripped), file=stdout)
    return 0


def main():
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        stream=sys.stderr,
    )

    try:
        config = config_from_args(args)
    except ValueError as exc:
        parser.error(str(exc))

    logger.debug("Starting structy with %s", config)
    try:
        code = run(config, sys.stdin, sys.stdout)
    except BrokenPipeError:
        raise
    except OSError as exc:
        print(f"stdin error: {exc}", file=sys.stderr)
        code = 1
    sys.exit(code)


def cli():
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)


if __name__ == "__main__":
    cli()
