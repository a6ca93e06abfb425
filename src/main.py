# src/main.py — v1
"""CLI entry point: get, queue, replay commands.

Usage:
    halgraph get <uri> [--rel REL] [--var name=value ...] [--state]
    halgraph queue
    halgraph replay

Settings (cache backend, offline mode, timeouts) come from HALGRAPH_*
environment variables or .env.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from halgraph.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        _setup_logging(args.verbose)
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="halgraph",
        description=f"halgraph v{__version__}: HAL resource client",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- get ---
    p_get = subparsers.add_parser("get", help="Fetch a resource and print it")
    p_get.add_argument("uri", help="Resource URI")
    p_get.add_argument(
        "--rel", default=None,
        help="Follow this relation from the resource and print the target(s)",
    )
    p_get.add_argument(
        "--var", dest="variables", action="append", type=_parse_variable,
        default=[], metavar="NAME=VALUE",
        help="URI template variable for --rel (repeatable)",
    )
    p_get.add_argument(
        "--state", action="store_true",
        help="Print properties only, without _links and _embedded",
    )
    p_get.set_defaults(func=_cmd_get)

    # --- queue ---
    p_queue = subparsers.add_parser(
        "queue", help="List requests queued while offline",
    )
    p_queue.set_defaults(func=_cmd_queue)

    # --- replay ---
    p_replay = subparsers.add_parser(
        "replay", help="Send requests queued while offline",
    )
    p_replay.set_defaults(func=_cmd_replay)

    return parser


def _parse_variable(text: str) -> tuple[str, str]:
    """Parse a NAME=VALUE template variable."""
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got {text!r}")
    return name, value


def _build_transport(settings: Any) -> Any:
    from halgraph.transport.httpx_transport import HttpxTransport
    return HttpxTransport(settings=settings)


async def _cmd_get(args: argparse.Namespace) -> int:
    """Fetch a resource (and optionally a relation) and print it as JSON."""
    from halgraph.api.facade import create_context
    from halgraph.config.settings import load_settings

    settings = load_settings()
    transport = _build_transport(settings)
    try:
        context = create_context(settings, transport=transport)
        resource = await context.open(args.uri)
        if args.rel is None:
            _print_resource(resource, args.state)
            return 0

        variables = dict(args.variables) or None
        targets = resource.rel(args.rel, variables)
        if targets is None:
            logger.error("Relation '%s' not found on %s", args.rel, args.uri)
            return 1
        for target in targets if isinstance(targets, list) else [targets]:
            await target.load()
            _print_resource(target, args.state)
        return 0
    finally:
        await transport.aclose()


async def _cmd_queue(args: argparse.Namespace) -> int:
    """List queued offline requests."""
    engine = _offline_engine()
    if engine is None:
        return 1

    try:
        pending = await engine.pending_requests()
    finally:
        await engine.online_engine.transport.aclose()
    print(f"\nQueued requests: {len(pending)}")
    for queued in pending:
        print(
            f"  #{queued.id:<5} {queued.method.upper():<7} {queued.url}"
            f"  ({queued.queued_at:%Y-%m-%d %H:%M:%S})"
        )
    return 0


async def _cmd_replay(args: argparse.Namespace) -> int:
    """Replay queued offline requests."""
    engine = _offline_engine()
    if engine is None:
        return 1

    try:
        sent = await engine.replay()
    finally:
        await engine.online_engine.transport.aclose()
    remaining = len(await engine.pending_requests())
    print("\nReplay complete:")
    print(f"  Sent:       {sent}")
    print(f"  Remaining:  {remaining}")
    return 0


def _offline_engine() -> Any:
    """Build the offline engine from settings, or None if offline mode is off."""
    from halgraph.api.facade import create_engine
    from halgraph.config.settings import load_settings

    settings = load_settings()
    if not settings.offline_enabled:
        logger.error("Offline mode is disabled (set HALGRAPH_OFFLINE_ENABLED=true)")
        return None
    return create_engine(settings, transport=_build_transport(settings))


def _print_resource(resource: Any, state_only: bool) -> None:
    data = resource.to_state() if state_only else resource.to_representation()
    print(json.dumps(data, indent=2, default=str))


def _setup_logging(verbose: bool) -> None:
    """Configure logging from settings; --verbose forces DEBUG."""
    from halgraph.config.settings import load_settings
    from halgraph.logging.logger import setup_logging

    settings = load_settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


if __name__ == "__main__":
    sys.exit(main())
