#!/usr/bin/env python3
r"""Pattern Catalogue CLI.

Commands:
    python -m pattern_catalog --version     Show version
    python -m pattern_catalog list          List every sample
    python -m pattern_catalog run KEY       Run one sample
    python -m pattern_catalog run-all       Run every sample in catalogue order
    python -m pattern_catalog info          Show version and system info

Examples:
    # Run the observer sample without pauses and with a fixed seed
    python -m pattern_catalog run observer --no-pace --seed 7

    # Each sample is also a program of its own
    python -m pattern_catalog.behavioral.observer
"""

from __future__ import annotations

import argparse
import difflib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from ._version import __version__
from .catalog import discover, run_demo
from .core import CatalogError, RunSettings, configure_logging, resolve_log_level

logger = logging.getLogger(__name__)


def _settings_from(args: argparse.Namespace) -> RunSettings:
    values = {"pace": not args.no_pace, "log_level": args.log_level}
    if args.seed is not None:
        values["seed"] = args.seed
    if args.workdir is not None:
        values["workdir"] = Path(args.workdir)
    return RunSettings(**values)


def _run_keys(keys: List[str], settings: RunSettings) -> int:
    for key in keys:
        try:
            run_demo(key, settings)
        except CatalogError as exc:
            logger.error("sample %s failed: %s", key, exc.message)
            print(f"fatal: {exc.message}", file=sys.stderr)
            return 1
        except Exception as exc:
            logger.exception("sample %s crashed", key)
            print(f"fatal: {exc}", file=sys.stderr)
            return 1
    return 0


def cmd_list(args: argparse.Namespace) -> int:
    """List every registered sample."""
    demos = discover().ordered()
    width = max(len(spec.key) for spec in demos)
    for spec in demos:
        print(f"{spec.key:<{width}}  {spec.category:<13}  {spec.title}")
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    """Run one sample by key."""
    demos = discover()
    if args.key not in demos:
        print(f"Error: unknown sample '{args.key}'", file=sys.stderr)
        matches = difflib.get_close_matches(args.key, [s.key for s in demos.ordered()])
        if matches:
            print(f"Did you mean: {', '.join(matches)}?", file=sys.stderr)
        print("Use 'python -m pattern_catalog list' to see every sample.", file=sys.stderr)
        return 2
    return _run_keys([args.key], _settings_from(args))


def cmd_run_all(args: argparse.Namespace) -> int:
    """Run every sample in catalogue order."""
    return _run_keys([spec.key for spec in discover().ordered()], _settings_from(args))


def cmd_info(args: argparse.Namespace) -> int:
    """Show detailed version and system information."""
    from ._version import print_version_info

    print_version_info()
    return 0


def _add_run_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--seed", type=int, default=None, help="Seed for pseudo-random choices")
    parser.add_argument(
        "--no-pace",
        action="store_true",
        help="Skip legibility sleeps (timings are still simulated)",
    )
    parser.add_argument(
        "--workdir",
        default=None,
        help="Directory for files written by samples (default: current directory)",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="pattern_catalog",
        description="A catalogue of design patterns, each a narrated sample program.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"pattern-catalog {__version__}",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Diagnostic level on stderr (default: $PATTERN_CATALOG_LOG_LEVEL or WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List every sample")
    list_parser.set_defaults(func=cmd_list)

    run_parser = subparsers.add_parser(
        "run",
        help="Run one sample",
        description="Run the sample registered under KEY.",
    )
    run_parser.add_argument("key", help="Sample key, e.g. observer")
    _add_run_options(run_parser)
    run_parser.set_defaults(func=cmd_run)

    run_all_parser = subparsers.add_parser("run-all", help="Run every sample")
    _add_run_options(run_all_parser)
    run_all_parser.set_defaults(func=cmd_run_all)

    info_parser = subparsers.add_parser("info", help="Show version and system information")
    info_parser.set_defaults(func=cmd_info)

    args = parser.parse_args(argv)
    try:
        args.log_level = resolve_log_level(args.log_level)
    except CatalogError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        for suggestion in exc.suggestions:
            print(f"  {suggestion}", file=sys.stderr)
        return 2
    configure_logging(args.log_level)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except ValidationError as exc:
        print(f"Error: invalid settings: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
