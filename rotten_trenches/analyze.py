"""CLI tool to analyze a KOL wallet's realized PNL without storing a snapshot."""

import argparse
import asyncio
import logging
import re
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import httpx

from .api import HeliusClient, PriceClient
from .config import Config, ConfigurationError, env_config, load_config
from .db import Repository
from .jobs import fetch_kol_trades
from .pnl import fold_transactions
from .reporting.dashboard import (
    WalletReport,
    print_comparison,
    print_trades_feed,
    print_wallet_report,
)

BASE58_ADDRESS = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")


async def resolve_wallet(identifier: str, repository: Repository | None) -> tuple[str, str | None]:
    """
    Resolve a wallet identifier to an address.

    Accepts:
    - a base58 Solana address
    - @username of a KOL stored in the database

    Returns:
        (address, username) tuple
    """
    if BASE58_ADDRESS.match(identifier):
        return identifier, None

    username = identifier[1:] if identifier.startswith("@") else identifier
    if repository:
        for kol in await repository.get_kols_with_wallets():
            if kol.username.lower() == username.lower():
                return kol.wallet_address, kol.username

    raise ValueError(f"Could not resolve wallet address for: {identifier}")


async def analyze_wallet(
    helius: HeliusClient,
    address: str,
    sol_price: float,
    username: str | None = None,
    window_hours: int | None = None,
    transaction_limit: int = 100,
) -> WalletReport:
    """Fetch a wallet's history and fold it into a report."""
    since_timestamp = None
    if window_hours is not None:
        since = datetime.now(timezone.utc) - timedelta(hours=window_hours)
        since_timestamp = int(since.timestamp())

    transactions = await helius.get_transactions(address, limit=transaction_limit)
    logging.info(f"Fetched {len(transactions)} transactions for {address[:8]}...")

    accumulator = fold_transactions(transactions, address, since_timestamp)
    return WalletReport(
        pnl=accumulator.totals(address),
        sol_price_usd=sol_price,
        username=username,
        window_hours=window_hours,
        open_positions=accumulator.ledger.positions(),
    )


async def main_async(args, config: Config):
    """Async main function."""
    try:
        api_key = config.require_helius_api_key()
    except ConfigurationError as e:
        logging.error(str(e))
        sys.exit(1)

    repository = None
    if Path(config.database.path).exists():
        repository = Repository(config.database.path)
        await repository.initialize()

    helius = HeliusClient(
        api_key,
        base_url=config.api.helius_base,
        rpc_url=config.api.helius_rpc,
        timeout=config.api.timeout_seconds,
    )
    prices = PriceClient(config.api.price_api)

    window_hours = None if args.all else args.window_hours

    try:
        wallets = []
        for identifier in args.wallets:
            try:
                address, username = await resolve_wallet(identifier, repository)
            except ValueError as e:
                logging.error(str(e))
                sys.exit(1)
            wallets.append((address, username))

        sol_price = await prices.get_sol_price(config.job.fallback_sol_price)

        reports = []
        for address, username in wallets:
            print(f"\nAnalyzing {username or address[:10]}...", flush=True)
            try:
                report = await analyze_wallet(
                    helius,
                    address,
                    sol_price,
                    username=username,
                    window_hours=window_hours,
                    transaction_limit=config.api.transaction_limit,
                )
            except httpx.HTTPStatusError as e:
                logging.error(f"Helius API error for {address}: {e.response.status_code}")
                continue
            reports.append(report)

            if not args.compare:
                print_wallet_report(report)

            if args.trades:
                feed = await fetch_kol_trades(
                    helius,
                    address,
                    limit=config.job.feed_limit,
                    min_sol_amount=config.job.min_feed_sol_amount,
                    transaction_limit=config.api.transaction_limit,
                )
                print_trades_feed(feed)

        if args.compare and len(reports) > 1:
            print_comparison(reports)
        elif args.compare:
            for report in reports:
                print_wallet_report(report)

    finally:
        await helius.close()
        await prices.close()
        if repository:
            await repository.close()


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Analyze the realized PNL of KOL wallets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyze a wallet over the last 24 hours
  python -m rotten_trenches.analyze 7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU

  # Analyze a stored KOL by username, counting every fetched transaction
  python -m rotten_trenches.analyze @cupsey --all

  # Show the latest trades too
  python -m rotten_trenches.analyze @cupsey --trades

  # Compare several wallets
  python -m rotten_trenches.analyze @cupsey @orangie @euris --compare
        """,
    )

    parser.add_argument(
        "wallets",
        nargs="+",
        help="Wallet addresses or @usernames of stored KOLs",
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to configuration file (default: config.yaml)",
    )
    parser.add_argument(
        "--window-hours",
        "-w",
        type=int,
        default=24,
        help="Only count trades from the last N hours (default: 24)",
    )
    parser.add_argument(
        "--all",
        "-a",
        action="store_true",
        help="Count every fetched transaction regardless of age",
    )
    parser.add_argument(
        "--trades",
        "-t",
        action="store_true",
        help="Also show the latest trades feed",
    )
    parser.add_argument(
        "--compare",
        "-c",
        action="store_true",
        help="Show comparison table for multiple wallets",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s | %(levelname)-8s | %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    config = load_config(args.config) if Path(args.config).exists() else env_config()

    try:
        asyncio.run(main_async(args, config))
    except KeyboardInterrupt:
        print("\nAnalysis interrupted.")
        sys.exit(0)


if __name__ == "__main__":
    main()
