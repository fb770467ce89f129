"""Command line entry point.

    portfolio-intel fetch   # refresh every source, then rebuild portfolio.json
    portfolio-intel serve   # run the API and dashboard
"""

import argparse
import asyncio
import logging
import sys

import httpx

from portfolio_intel.config import Settings
from portfolio_intel.exceptions.custom import MissingCredentialError
from portfolio_intel.main import configure_logging
from portfolio_intel.services.fetch_all import PortfolioRefresher

logger = logging.getLogger(__name__)


async def _fetch(settings: Settings) -> None:
    async with httpx.AsyncClient(timeout=30.0) as client:
        metadata = await PortfolioRefresher(settings, client).run()
    logger.info(
        "Portfolio data ready: %d/%d Google, %d/%d TripAdvisor (saved to %s)",
        metadata.googleSuccess, metadata.propertyCount,
        metadata.taSuccess, metadata.propertyCount,
        settings.data_dir,
    )


def fetch(settings: Settings) -> int:
    try:
        asyncio.run(_fetch(settings))
    except MissingCredentialError as exc:
        logger.error("%s", exc.message)
        return 1
    return 0


def serve(settings: Settings) -> int:
    import uvicorn

    uvicorn.run(
        "portfolio_intel.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="portfolio-intel")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("fetch", help="fetch all sources and rebuild the portfolio files")
    serve_parser = sub.add_parser("serve", help="run the API and dashboard")
    serve_parser.add_argument("--host")
    serve_parser.add_argument("--port", type=int)
    args = parser.parse_args(argv)

    settings = Settings()
    configure_logging(settings.log_level)

    if args.command == "fetch":
        return fetch(settings)

    if args.host:
        settings.host = args.host
    if args.port:
        settings.port = args.port
    return serve(settings)


if __name__ == "__main__":
    sys.exit(main())
