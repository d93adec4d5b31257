"""Database repository for KOLs and PNL snapshots."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from .models import SCHEMA

logger = logging.getLogger(__name__)


@dataclass
class Kol:
    """A tracked influencer."""

    id: int
    username: str
    wallet_address: str | None


@dataclass
class PnlSnapshot:
    """Aggregated PNL for one KOL and one calendar month."""

    kol_id: int
    wallet_address: str
    month_year: str  # YYYY-MM
    pnl_sol: float
    pnl_usd: float
    win_count: int
    loss_count: int
    total_trades: int
    win_rate: float
    fetched_at: datetime


class Repository:
    """Database repository for all persistence operations."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)
        self._connection: aiosqlite.Connection | None = None

    async def initialize(self):
        """Initialize the database and create tables."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._connection = await aiosqlite.connect(self.db_path)
        self._connection.row_factory = aiosqlite.Row

        await self._connection.executescript(SCHEMA)
        await self._connection.commit()

        logger.info(f"Database initialized at {self.db_path}")

    async def close(self):
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    @property
    def conn(self) -> aiosqlite.Connection:
        """Get the database connection."""
        if not self._connection:
            raise RuntimeError("Database not initialized. Call initialize() first.")
        return self._connection

    # KOL Operations

    async def add_kol(self, username: str, wallet_address: str | None = None) -> int:
        """Insert a KOL, or update its wallet if the username exists. Returns its ID."""
        await self.conn.execute(
            """
            INSERT INTO kols (username, wallet_address) VALUES (?, ?)
            ON CONFLICT(username) DO UPDATE SET
                wallet_address = COALESCE(excluded.wallet_address, kols.wallet_address)
            """,
            (username, wallet_address),
        )
        await self.conn.commit()

        async with self.conn.execute(
            "SELECT id FROM kols WHERE username = ?", (username,)
        ) as cursor:
            row = await cursor.fetchone()
            return row["id"]

    async def get_kols_with_wallets(self) -> list[Kol]:
        """Get all KOLs that have a wallet address."""
        async with self.conn.execute(
            """
            SELECT id, username, wallet_address FROM kols
            WHERE wallet_address IS NOT NULL AND wallet_address != ''
            ORDER BY id
            """
        ) as cursor:
            rows = await cursor.fetchall()
            return [
                Kol(
                    id=row["id"],
                    username=row["username"],
                    wallet_address=row["wallet_address"],
                )
                for row in rows
            ]

    # Snapshot Operations

    async def upsert_pnl_snapshot(self, snapshot: PnlSnapshot):
        """Insert or overwrite the snapshot for the KOL and month."""
        await self.conn.execute(
            """
            INSERT INTO kol_pnl_snapshots (
                kol_id, wallet_address, month_year, pnl_sol, pnl_usd,
                win_count, loss_count, total_trades, win_rate, fetched_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(kol_id, month_year) DO UPDATE SET
                wallet_address = excluded.wallet_address,
                pnl_sol = excluded.pnl_sol,
                pnl_usd = excluded.pnl_usd,
                win_count = excluded.win_count,
                loss_count = excluded.loss_count,
                total_trades = excluded.total_trades,
                win_rate = excluded.win_rate,
                fetched_at = excluded.fetched_at
            """,
            (
                snapshot.kol_id,
                snapshot.wallet_address,
                snapshot.month_year,
                snapshot.pnl_sol,
                snapshot.pnl_usd,
                snapshot.win_count,
                snapshot.loss_count,
                snapshot.total_trades,
                snapshot.win_rate,
                snapshot.fetched_at.isoformat(),
            ),
        )
        await self.conn.commit()

    async def get_pnl_snapshot(self, kol_id: int, month_year: str) -> PnlSnapshot | None:
        """Get the snapshot for a KOL and month, if any."""
        async with self.conn.execute(
            "SELECT * FROM kol_pnl_snapshots WHERE kol_id = ? AND month_year = ?",
            (kol_id, month_year),
        ) as cursor:
            row = await cursor.fetchone()
            return _snapshot_from_row(row) if row else None

    async def get_pnl_snapshots(self, month_year: str) -> list[PnlSnapshot]:
        """Get all snapshots for a month, best PNL first."""
        async with self.conn.execute(
            """
            SELECT * FROM kol_pnl_snapshots
            WHERE month_year = ?
            ORDER BY pnl_sol DESC
            """,
            (month_year,),
        ) as cursor:
            rows = await cursor.fetchall()
            return [_snapshot_from_row(row) for row in rows]


def _snapshot_from_row(row: aiosqlite.Row) -> PnlSnapshot:
    return PnlSnapshot(
        kol_id=row["kol_id"],
        wallet_address=row["wallet_address"],
        month_year=row["month_year"],
        pnl_sol=row["pnl_sol"],
        pnl_usd=row["pnl_usd"],
        win_count=row["win_count"],
        loss_count=row["loss_count"],
        total_trades=row["total_trades"],
        win_rate=row["win_rate"],
        fetched_at=datetime.fromisoformat(row["fetched_at"]),
    )
