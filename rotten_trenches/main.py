"""Main entry point for the Rotten Trenches PNL job."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import uvicorn

from .api import HeliusClient, PriceClient
from .config import Config, load_config
from .db import Repository
from .jobs import JobResult, PnlJob
from .reporting.logger import SnapshotLogger, setup_app_logging
from .server import create_app

logger = logging.getLogger(__name__)


async def run_job(config: Config) -> JobResult:
    """Run the PNL job once with clients built from the config."""
    repository = Repository(config.database.path)
    helius = HeliusClient(
        config.helius_api_key or "",
        base_url=config.api.helius_base,
        rpc_url=config.api.helius_rpc,
        timeout=config.api.timeout_seconds,
    )
    prices = PriceClient(config.api.price_api)
    snapshot_logger = SnapshotLogger(
        log_file=config.logging.file,
        log_level=config.logging.level,
        max_file_size_mb=config.logging.max_file_size_mb,
        backup_count=config.logging.backup_count,
    )

    try:
        await repository.initialize()
        job = PnlJob(config, repository, helius, prices, snapshot_logger)
        return await job.run()
    finally:
        snapshot_logger.close()
        await helius.close()
        await prices.close()
        await repository.close()


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Rotten Trenches - compute monthly PNL snapshots for tracked KOLs"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve the HTTP trigger endpoints instead of running once",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address for --serve")
    parser.add_argument("--port", type=int, default=8000, help="Port for --serve")
    return parser.parse_args()


def main():
    """Main entry point."""
    args = parse_args()

    config_path = Path(args.config)
    if not config_path.exists():
        logging.basicConfig()
        logger.error(f"Configuration file not found: {config_path}")
        sys.exit(1)

    config = load_config(config_path)

    if args.debug:
        config.logging.level = "DEBUG"

    setup_app_logging(config.logging.level)

    if args.serve:
        uvicorn.run(create_app(config), host=args.host, port=args.port)
        return

    try:
        result = asyncio.run(run_job(config))
    except KeyboardInterrupt:
        sys.exit(130)

    print(json.dumps(result.to_dict(), indent=2))
    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    main()
