"""
Command-line interface for the domain lookup system.

This module provides the main CLI entry point with commands for:
- search: Check one label across every TLD in the catalog
- tlds: List the TLD catalog
- config: Configuration management
"""

import argparse
import asyncio
import dataclasses
import json
import sys
from pathlib import Path
from typing import Optional, TextIO

from . import __version__
from .api_client import DomainApiClient
from .audit_logger import AuditLogger, create_logger
from .config import (
    SystemConfig,
    create_default_config,
    load_config_from_env,
    load_config_from_file,
    save_config_to_file,
)
from .enums import RunState, TldKind
from .exceptions import FetchError, QueryError
from .models import AvailabilityResult
from .orchestrator import AvailabilityOrchestrator, SearchRun
from .term_validator import TermValidator
from .tld_catalog import TldCatalog


DEFAULT_CONFIG_PATH = Path.home() / ".domain_lookup" / "config.json"

EXIT_AVAILABLE = 0
EXIT_NONE_AVAILABLE = 1
EXIT_ERROR = 2

GROUP_HEADERS = (
    (TldKind.COUNTRY_CODE, "Country Domains"),
    (TldKind.GENERIC, "General Domains"),
)


def resolve_config(args: argparse.Namespace) -> Optional[SystemConfig]:
    """
    Build the effective configuration for a command.

    A --config file wins over the environment; command line flags override both.
    """
    config_path = getattr(args, "config", None)
    if config_path:
        config = load_config_from_file(Path(config_path))
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
            return None
    else:
        config = load_config_from_env()

    if getattr(args, "dry_run", False):
        config = dataclasses.replace(config, simulation_mode=True)
    if getattr(args, "base_url", None):
        config = dataclasses.replace(
            config, api=dataclasses.replace(config.api, base_url=args.base_url)
        )
    if getattr(args, "timeout", None) is not None:
        config = dataclasses.replace(
            config, api=dataclasses.replace(config.api, timeout_seconds=args.timeout)
        )
    if getattr(args, "delay", None) is not None:
        config = dataclasses.replace(
            config, pacing=dataclasses.replace(config.pacing, interval_seconds=args.delay)
        )
    if getattr(args, "verbose", False):
        config = dataclasses.replace(
            config, logging=dataclasses.replace(config.logging, level="debug")
        )

    return config


def validate_config(config: SystemConfig) -> list[str]:
    """Return a list of problems with the configuration (empty if valid)."""
    problems = []
    if not config.api.base_url.startswith(("http://", "https://")):
        problems.append(f"base_url is not an HTTP(S) URL: {config.api.base_url}")
    if config.api.timeout_seconds <= 0:
        problems.append("timeout_seconds must be positive")
    if config.pacing.interval_seconds < 0:
        problems.append("interval_seconds must not be negative")
    if config.logging.level not in ("debug", "info", "warn", "error"):
        problems.append(f"unknown log level: {config.logging.level}")
    if config.logging.output_format not in ("json", "text", "both"):
        problems.append(f"unknown log format: {config.logging.output_format}")
    return problems


def _resolve_valid_config(args: argparse.Namespace) -> Optional[SystemConfig]:
    config = resolve_config(args)
    if config is None:
        return None

    problems = validate_config(config)
    if problems:
        for problem in problems:
            print(f"Error: {problem}", file=sys.stderr)
        return None

    return config


def create_client(config: SystemConfig) -> DomainApiClient:
    return DomainApiClient(
        base_url=config.api.base_url,
        timeout=config.api.timeout_seconds,
        simulation_mode=config.simulation_mode,
    )


def format_result(result: AvailabilityResult) -> str:
    mark = "✔" if result.available else "✘"
    status = "available" if result.available else "taken"
    return f"  {mark} {result.full_domain:<40} {status}"


def render_run(run: SearchRun, stream: Optional[TextIO] = None) -> None:
    """
    Print the summary of a finished run, grouped by TLD kind.

    Domains that were never checked (cancelled or failed runs) are shown as pending.
    """
    stream = stream or sys.stdout
    by_domain = {r.full_domain: r for r in run.results}

    for kind, header in GROUP_HEADERS:
        tlds = [t for t in run.tlds if t.kind == kind]
        if not tlds:
            continue
        print(f"\n{header}", file=stream)
        print("-" * len(header), file=stream)
        for tld in tlds:
            full_domain = f"{run.term}.{tld.name}"
            result = by_domain.get(full_domain)
            if result is None:
                print(f"  · {full_domain:<40} not checked", file=stream)
            else:
                print(format_result(result), file=stream)

    available = sum(1 for r in run.results if r.available)
    print(
        f"\nSummary: {available}/{len(run.results)} checked domain(s) available "
        f"({len(run.tlds)} TLDs, run {run.state.value})",
        file=stream,
    )


async def search_term(
    term: str,
    config: SystemConfig,
    as_json: bool = False,
    logger: Optional[AuditLogger] = None,
) -> int:
    """
    Load the catalog and check one term across it.

    Returns:
        Exit code (0 if any domain is available, 1 if none, 2 on error)
    """
    validation = TermValidator().validate(term)
    if not validation.valid:
        print(f"Error: {validation.error.message}", file=sys.stderr)
        return EXIT_ERROR

    async with create_client(config) as client:
        catalog = TldCatalog(client, logger=logger)
        try:
            await catalog.load()
        except FetchError as e:
            print(f"Error: Could not load TLD catalog: {e.message}", file=sys.stderr)
            return EXIT_ERROR

        if config.simulation_mode and not as_json:
            print("Simulation mode: no network requests are made.")

        async with AvailabilityOrchestrator(
            client=client,
            pacing_interval=config.pacing.interval_seconds,
            logger=logger,
        ) as orchestrator:
            run = orchestrator.start(validation.canonical_term, catalog)

            if not as_json:
                print(f"Checking {run.term} across {len(run.tlds)} TLD(s)...")

            try:
                async for result in run:
                    if not as_json:
                        print(format_result(result))
            except QueryError as e:
                print(f"Error: {e.message}", file=sys.stderr)

    if as_json:
        output = {
            "term": run.term,
            "state": run.state.value,
            "results": [r.to_dict() for r in run.results],
            "error": run.error.to_dict() if run.error else None,
        }
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        render_run(run)

    if run.state == RunState.FAILED:
        return EXIT_ERROR
    if any(r.available for r in run.results):
        return EXIT_AVAILABLE
    return EXIT_NONE_AVAILABLE


async def list_tlds(
    config: SystemConfig,
    kind: Optional[TldKind] = None,
    logger: Optional[AuditLogger] = None,
) -> int:
    """Print the TLD catalog, optionally filtered by kind."""
    async with create_client(config) as client:
        catalog = TldCatalog(client, logger=logger)
        try:
            await catalog.load()
        except FetchError as e:
            print(f"Error: Could not load TLD catalog: {e.message}", file=sys.stderr)
            return EXIT_ERROR

    tlds = catalog.by_kind(kind) if kind else catalog.tlds
    for tld in tlds:
        print(f".{tld.name:<20} {tld.kind.value}")
    print(f"\n{len(tlds)} TLD(s)")
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    """Handle the 'search' command."""
    config = _resolve_valid_config(args)
    if config is None:
        return EXIT_ERROR

    logger = create_logger(config.logging)

    return asyncio.run(search_term(
        term=args.term,
        config=config,
        as_json=args.json,
        logger=logger,
    ))


def cmd_tlds(args: argparse.Namespace) -> int:
    """Handle the 'tlds' command."""
    config = _resolve_valid_config(args)
    if config is None:
        return EXIT_ERROR

    kind = TldKind[args.kind.upper()] if args.kind else None
    return asyncio.run(list_tlds(config, kind=kind, logger=create_logger(config.logging)))


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    config_path = Path(args.path) if args.path else DEFAULT_CONFIG_PATH

    if args.action == "show":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"No configuration found at: {config_path}")
            print("Use 'config init' to create a default configuration.")
            return 1

        print(f"Configuration from: {config_path}")
        print(f"  Base URL: {config.api.base_url}")
        print(f"  Timeout: {config.api.timeout_seconds}s")
        print(f"  Pacing interval: {config.pacing.interval_seconds}s")
        print(f"  Simulation mode: {config.simulation_mode}")
        print(f"  Log level: {config.logging.level}")
        print(f"  Log format: {config.logging.output_format}")
        return 0

    elif args.action == "init":
        if config_path.exists() and not args.force:
            print(f"Configuration already exists at: {config_path}")
            print("Use --force to overwrite.")
            return 1

        if save_config_to_file(create_default_config(), config_path):
            print(f"Configuration created at: {config_path}")
            return 0
        return 1

    elif args.action == "validate":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
            return 1

        problems = validate_config(config)
        if problems:
            for problem in problems:
                print(f"Error: {problem}", file=sys.stderr)
            return 1

        print(f"Configuration at {config_path} is valid.")
        return 0

    return 1


def _add_connection_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Simulation mode - no real network requests",
    )
    parser.add_argument(
        "--config", "-c",
        help="Path to configuration file",
    )
    parser.add_argument(
        "--base-url",
        help="Base URL of the lookup API",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Per-request timeout in seconds",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="domain-lookup",
        description="Check a domain label across many TLDs, one paced request at a time",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'search' command
    search_parser = subparsers.add_parser(
        "search",
        help="Check a label across every TLD in the catalog",
    )
    search_parser.add_argument(
        "term",
        help="Label to check (e.g., google)",
    )
    _add_connection_args(search_parser)
    search_parser.add_argument(
        "--delay",
        type=float,
        help="Seconds to wait between queries (default: 1.0)",
    )
    search_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the results as JSON",
    )
    search_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log at debug level (overrides the configured log level)",
    )
    search_parser.set_defaults(func=cmd_search)

    # 'tlds' command
    tlds_parser = subparsers.add_parser(
        "tlds",
        help="List the TLD catalog",
    )
    _add_connection_args(tlds_parser)
    tlds_parser.add_argument(
        "--kind", "-k",
        choices=["generic", "country_code"],
        help="Only list TLDs of this kind",
    )
    tlds_parser.set_defaults(func=cmd_tlds)

    # 'config' command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument(
        "action",
        choices=["show", "init", "validate"],
        help="Configuration action",
    )
    config_parser.add_argument(
        "--path", "-p",
        help="Path to configuration file",
    )
    config_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing configuration",
    )
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
