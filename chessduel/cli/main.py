from __future__ import annotations

import argparse
from typing import List, Optional

import uvicorn

from chessduel.config import Settings
from chessduel.protocol.http.app import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the chess duel HTTP API")
    parser.add_argument("--host", type=str, default=None, help="Bind address (env CHESSDUEL_HOST)")
    parser.add_argument("--port", type=int, default=None, help="Port (env CHESSDUEL_PORT)")
    parser.add_argument(
        "--log-level", type=str, default=None, help="Logging level (env CHESSDUEL_LOG_LEVEL)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env().override(
        host=args.host,
        port=args.port,
        log_level=args.log_level.upper() if args.log_level else None,
    )

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
