"""
Command line.

    python -m storefront serve              # HTTP API on $HOST:$PORT
    python -m storefront init-db [--seed]   # create tables, optionally load demo data
"""

import argparse
import asyncio
from collections.abc import Sequence
from dataclasses import replace

import structlog
import uvicorn

from storefront.api import create_app
from storefront.buyers import SQLAlchemyBuyerDirectory
from storefront.config import Settings
from storefront.db import create_database
from storefront.inventory import SQLAlchemyLedger
from storefront.logs import configure_logging
from storefront.seed import seed_demo

logger = structlog.get_logger()


async def init_db(settings: Settings, seed: bool) -> None:
    session_factory, engine = await create_database(settings.database_url)
    try:
        if seed:
            await seed_demo(
                SQLAlchemyBuyerDirectory(session_factory), SQLAlchemyLedger(session_factory)
            )
        logger.info("database_initialized", seeded=seed)
    finally:
        await engine.dispose()


def serve(settings: Settings) -> None:
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="storefront")
    commands = parser.add_subparsers(dest="command", required=True)

    serve_cmd = commands.add_parser("serve", help="run the HTTP API")
    serve_cmd.add_argument("--host", help="overrides $HOST")
    serve_cmd.add_argument("--port", type=int, help="overrides $PORT")

    init_cmd = commands.add_parser("init-db", help="create tables")
    init_cmd.add_argument("--seed", action="store_true", help="load demo buyers and gadgets")

    args = parser.parse_args(argv)
    settings = Settings.from_env()

    match args.command:
        case "serve":
            settings = replace(
                settings,
                host=args.host or settings.host,
                port=args.port or settings.port,
            )
            serve(settings)
        case "init-db":
            configure_logging(settings.log_level, settings.log_json)
            asyncio.run(init_db(settings, args.seed or settings.seed_demo))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
