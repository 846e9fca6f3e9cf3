#!/usr/bin/env python3
"""CLI for the urshort redirect service.

Usage:
    python -m cli <command>

Commands:
    serve               Run the HTTP server on the configured host and port
    check               Load the environment and list mappings and skipped entries
    resolve PATH...     Print how each path would be resolved
"""

import argparse
import sys

from core.config import ENV_PREFIX, get_settings, read_environment
from core.logger import configure_logging, get_logger
from services.mapping_loader import LoadResult, load_uri_mappings
from services.resolver import Redirect

logger = get_logger(__name__)


def _load() -> LoadResult:
    settings = get_settings()
    return load_uri_mappings(
        read_environment(settings),
        ENV_PREFIX,
        full_match=settings.pattern_full_match,
        strict_templates=settings.pattern_strict_templates,
    )


def cmd_serve(host: str | None, port: int | None) -> int:
    """Run uvicorn with the FastAPI app."""
    import uvicorn

    settings = get_settings()
    host = host or settings.host
    port = port or settings.port
    logger.info("server.starting", host=host, port=port)
    # log_config=None keeps the structlog handlers installed by main.py
    uvicorn.run("main:app", host=host, port=port, log_config=None)
    return 0


def cmd_check() -> int:
    """Print the loaded mappings; exit 1 when any entry was skipped."""
    result = _load()
    mappings = result.mappings

    print(f"Port: {get_settings().port}")
    print()
    print("Loaded Standard URIs:")
    for key, url in sorted(mappings.standard.items()):
        print(f"  {key!r} -> {url}")
    print()
    print("Loaded Pattern URIs:")
    for entry in mappings.patterns:
        print(f"  [{entry.place}] {entry.regex.pattern} -> {entry.template}")

    if result.issues:
        print()
        print("Skipped entries:")
        for issue in result.issues:
            print(f"  {issue.variable}: {issue.reason}")
        return 1
    return 0


def cmd_resolve(paths: list[str]) -> int:
    """Print the outcome for each path; exit 1 when any path is not found."""
    mappings = _load().mappings
    exit_code = 0
    for path in paths:
        outcome = mappings.resolve(path)
        if isinstance(outcome, Redirect):
            print(f"{path} -> {outcome.url}")
        else:
            print(f"{path} -> not found ({outcome.reason})")
            exit_code = 1
    return exit_code


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="urshort redirect service CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP server")
    serve_parser.add_argument("--host", default=None, help="Override URSHORT_HOST")
    serve_parser.add_argument(
        "--port", type=int, default=None, help="Override URSHORT_PORT"
    )
    subparsers.add_parser(
        "check",
        help="List loaded mappings and skipped entries",
    )
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Show how request paths resolve",
    )
    resolve_parser.add_argument("paths", nargs="+", metavar="PATH")

    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.log_level, json_format=settings.log_format == "json")

    if args.command == "serve":
        return cmd_serve(args.host, args.port)
    elif args.command == "check":
        return cmd_check()
    elif args.command == "resolve":
        return cmd_resolve(args.paths)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
