"""PNL job - computes and stores monthly PNL snapshots for every tracked KOL."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone

import aiosqlite
import httpx

from ..api import HeliusClient, PriceClient
from ..config import Config, ConfigurationError
from ..db import Kol, PnlSnapshot, Repository
from ..pnl import compute_wallet_pnl
from ..reporting.logger import SnapshotLogger

logger = logging.getLogger(__name__)


@dataclass
class KolResult:
    """Summary line for one successfully processed KOL."""

    kol: str
    pnl_sol: float
    trades: int
    win_rate: float


@dataclass
class JobResult:
    """Outcome of one job run."""

    success: bool
    message: str | None = None
    results: list[KolResult] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "message": self.message,
            "results": [asdict(r) for r in self.results],
        }


def month_key(when: datetime) -> str:
    """Calendar month of a timestamp as YYYY-MM."""
    return f"{when.year}-{when.month:02d}"


class PnlJob:
    """
    Batch job over all KOLs with a wallet.

    KOLs are processed one at a time. A failure for one KOL is logged and
    that KOL is left out of the results; it never stops the batch. Only a
    missing API key or an unreadable KOL list fails the whole run.
    """

    def __init__(
        self,
        config: Config,
        repository: Repository,
        helius: HeliusClient,
        prices: PriceClient,
        snapshot_logger: SnapshotLogger | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.config = config
        self.repository = repository
        self.helius = helius
        self.prices = prices
        self.snapshot_logger = snapshot_logger
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def run(self) -> JobResult:
        """Run the job once over every KOL."""
        logger.info("Starting PNL data fetch job...")

        try:
            self.config.require_helius_api_key()
        except ConfigurationError as e:
            logger.error(f"PNL fetch job error: {e}")
            return JobResult(success=False, error=str(e))

        try:
            kols = await self.repository.get_kols_with_wallets()
        except aiosqlite.Error as e:
            logger.error(f"Failed to fetch KOLs: {e}", exc_info=True)
            return JobResult(success=False, error=f"Failed to fetch KOLs: {e}")

        logger.info(f"Found {len(kols)} KOLs with wallet addresses")

        now = self._clock()
        month_year = month_key(now)

        since_timestamp = None
        if self.config.job.lookback_hours is not None:
            since = now - timedelta(hours=self.config.job.lookback_hours)
            since_timestamp = int(since.timestamp())
            logger.info(f"Counting trades since {since.isoformat()}")

        sol_price = await self.prices.get_sol_price(self.config.job.fallback_sol_price)

        results = []
        for i, kol in enumerate(kols):
            result = await self._process_kol(kol, month_year, since_timestamp, sol_price)
            if result:
                results.append(result)

            if i < len(kols) - 1 and self.config.job.entity_delay_seconds > 0:
                await asyncio.sleep(self.config.job.entity_delay_seconds)

        message = f"Updated PNL data for {len(results)} KOLs"
        logger.info(f"PNL fetch completed. {message}")
        return JobResult(success=True, message=message, results=results)

    async def _process_kol(
        self,
        kol: Kol,
        month_year: str,
        since_timestamp: int | None,
        sol_price: float,
    ) -> KolResult | None:
        """Compute and store one KOL's snapshot. Returns None if it was skipped."""
        wallet = kol.wallet_address
        if not wallet:
            return None

        try:
            logger.info(f"Fetching transactions for {kol.username} ({wallet})")
            transactions = await self.helius.get_transactions(
                wallet, limit=self.config.api.transaction_limit
            )
        except httpx.HTTPStatusError as e:
            logger.error(f"Helius API error for {wallet}: {e.response.status_code}")
            return None
        except httpx.HTTPError as e:
            logger.error(f"Helius request failed for {wallet}: {e}")
            return None
        except Exception as e:
            logger.error(f"Error fetching transactions for {kol.username}: {e}", exc_info=True)
            return None

        try:
            pnl = compute_wallet_pnl(transactions, wallet, since_timestamp)
        except Exception as e:
            logger.error(f"Error processing {kol.username}: {e}", exc_info=True)
            return None

        logger.info(
            f"{kol.username}: PNL {pnl.pnl_sol:.4f} SOL, {pnl.total_trades} trades, "
            f"{pnl.win_rate:.1f}% win rate"
        )

        snapshot = PnlSnapshot(
            kol_id=kol.id,
            wallet_address=wallet,
            month_year=month_year,
            pnl_sol=pnl.pnl_sol,
            pnl_usd=pnl.pnl_usd(sol_price),
            win_count=pnl.win_count,
            loss_count=pnl.loss_count,
            total_trades=pnl.total_trades,
            win_rate=pnl.win_rate,
            fetched_at=self._clock(),
        )

        try:
            await self.repository.upsert_pnl_snapshot(snapshot)
        except aiosqlite.Error as e:
            logger.error(f"Failed to upsert PNL for {kol.username}: {e}")
            return None

        if self.snapshot_logger:
            self.snapshot_logger.log_snapshot(snapshot, kol=kol.username)

        return KolResult(
            kol=kol.username,
            pnl_sol=pnl.pnl_sol,
            trades=pnl.total_trades,
            win_rate=pnl.win_rate,
        )
