from __future__ import annotations

import argparse
from dataclasses import replace
from typing import List, Optional

import uvicorn

from ..config import LOG_LEVELS, GameConfig, ServerConfig
from ..protocol.http.app import create_app


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the chess AI game API")
    parser.add_argument(
        "--host", default=defaults.host, help=f"Bind address (default: {defaults.host})"
    )
    parser.add_argument(
        "--port", type=int, default=defaults.port, help=f"Port (default: {defaults.port})"
    )
    parser.add_argument(
        "--log-level",
        default=defaults.log_level,
        type=str.upper,
        choices=LOG_LEVELS,
        help=f"Logging level (default: {defaults.log_level})",
    )
    parser.add_argument("--ai-level", type=int, default=None, help="Default AI level 1..5")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the AI's random choices")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser(ServerConfig.from_env()).parse_args(argv)
    server = ServerConfig(host=args.host, port=args.port, log_level=args.log_level)
    game = GameConfig.from_env()
    if args.ai_level is not None:
        game = replace(game, ai_level=args.ai_level)
    if args.seed is not None:
        game = replace(game, seed=args.seed)
    app = create_app(game_config=game, log_level=server.log_level)
    uvicorn.run(app, host=server.host, port=server.port, log_level=server.log_level.lower())


if __name__ == "__main__":
    main()
