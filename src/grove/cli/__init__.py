"""CLI module for the grove runner."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from grove.config import GroveConfig, load_config
from grove.discovery import collect
from grove.errors import ConfigError
from grove.reports import ConsoleReporter
from grove.version import __version__
from grove.world import World


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the grove CLI."""
    try:
        config = load_config()
    except ConfigError as exc:
        Console(stderr=True).print(f"[red]{exc}[/red]")
        raise SystemExit(2) from exc

    parser = _build_parser()
    raw_argv = list(sys.argv[1:] if argv is None else argv)
    args = parser.parse_args([*config.addopts, *raw_argv])
    raise SystemExit(asyncio.run(_run(args, config)))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="grove", description="Run nested example groups")
    parser.add_argument("paths", nargs="*", help="Spec files or directories")
    parser.add_argument(
        "-t",
        "--tag",
        dest="include_tags",
        action="append",
        metavar="KEY[=VALUE]",
        help="Only run examples with this tag (repeatable)",
    )
    parser.add_argument(
        "-x",
        "--exclude-tag",
        dest="exclude_tags",
        action="append",
        metavar="KEY[=VALUE]",
        help="Skip examples with this tag (repeatable)",
    )
    parser.add_argument("--maxfail", type=int, help="Stop after this many failures")
    parser.add_argument("-q", "--quiet", action="count", default=0, help="Reduce output")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase output")
    parser.add_argument("--version", action="version", version=f"grove {__version__}")
    return parser


def _coerce(value: str) -> Any:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    try:
        return int(value)
    except ValueError:
        return value


def parse_tag(expression: str) -> tuple[str, Any]:
    """Parse ``key`` or ``key=value`` into a filter entry."""
    key, sep, value = expression.partition("=")
    key = key.strip()
    if not key:
        msg = f"Invalid tag expression: {expression!r}"
        raise ValueError(msg)
    if not sep:
        return key, True
    return key, _coerce(value.strip())


def _resolve_filters(
    args: argparse.Namespace,
    config: GroveConfig,
) -> tuple[dict[str, Any], dict[str, Any]]:
    inclusion = dict(config.inclusion_filter)
    exclusion = dict(config.exclusion_filter)
    inclusion.update(parse_tag(expr) for expr in args.include_tags or [])
    exclusion.update(parse_tag(expr) for expr in args.exclude_tags or [])
    return inclusion, exclusion


def _resolve_paths(args: argparse.Namespace, config: GroveConfig) -> list[str]:
    if args.paths:
        return args.paths
    return config.spec_paths


def _resolve_maxfail(args: argparse.Namespace, config: GroveConfig) -> int | None:
    if args.maxfail is not None:
        return args.maxfail if args.maxfail > 0 else None
    return config.maxfail


def _resolve_verbosity(args: argparse.Namespace, config: GroveConfig) -> int:
    return config.verbosity + args.verbose - args.quiet


def _configure_logging(verbosity: int) -> None:
    level = logging.DEBUG if verbosity >= 2 else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


async def _run(args: argparse.Namespace, config: GroveConfig) -> int:
    console = Console()
    verbosity = _resolve_verbosity(args, config)
    _configure_logging(verbosity)

    try:
        inclusion, exclusion = _resolve_filters(args, config)
    except ValueError as exc:
        console.print(f"[red]{exc}[/red]")
        return 2

    world = World(inclusion_filter=inclusion, exclusion_filter=exclusion)
    for path in _resolve_paths(args, config):
        try:
            collect(path, world)
        except FileNotFoundError as exc:
            console.print(f"[red]{exc}[/red]")
            return 2

    reporter = ConsoleReporter(console=console, verbosity=verbosity)
    run_result = await world.run_async(reporter, maxfail=_resolve_maxfail(args, config))
    return 0 if run_result.success else 1


__all__ = ["main", "parse_tag"]
