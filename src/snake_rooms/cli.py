"""CLI launcher for the Snake Rooms server."""

from __future__ import annotations

import argparse
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-rooms",
        description="Multiplayer snake room server.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    serve_p = sub.add_parser("serve", help="Run the WebSocket room server.")
    serve_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (flags override it).",
    )
    serve_p.add_argument("--host", type=str, default=None)
    serve_p.add_argument("--port", type=int, default=None)
    serve_p.add_argument("--tick-ms", type=int, default=None)
    serve_p.add_argument("--rows", type=int, default=None)
    serve_p.add_argument("--cols", type=int, default=None)
    serve_p.add_argument("--max-players", type=int, default=None)
    serve_p.add_argument(
        "--log-level", type=str, default="info",
        choices=["debug", "info", "warning", "error"],
    )

    return parser


def _resolve_config(args: argparse.Namespace):
    from snake_rooms.server.config import ServerConfig

    base = ServerConfig.load(args.config) if args.config else None
    config = ServerConfig.from_env(base=base)

    overrides: dict = {}
    for name in ("host", "port", "tick_ms", "rows", "cols", "max_players"):
        val = getattr(args, name, None)
        if val is not None:
            overrides[name] = val

    if overrides:
        d = config.to_dict()
        d.update(overrides)
        d["colors"] = tuple(d["colors"])
        config = ServerConfig(**d)
    return config


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from snake_rooms.server.app import create_app

    try:
        config = _resolve_config(args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    logger.info(
        "Serving on ws://%s:%d/ws (grid %dx%d, tick %d ms).",
        config.host, config.port, config.cols, config.rows, config.tick_ms,
    )
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=args.log_level,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-rooms`` CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(args, "log_level", "info").upper(),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "serve": _run_serve,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
