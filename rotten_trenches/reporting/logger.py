"""Snapshot logging - formats and outputs PNL snapshots to console and file."""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from ..db import PnlSnapshot


class SnapshotFormatter(logging.Formatter):
    """Custom formatter for snapshot messages."""

    SNAPSHOT_FORMAT = """
================================================================================
{timestamp} | PNL SNAPSHOT | {month}
--------------------------------------------------------------------------------
  KOL:         {kol}
  Wallet:      {wallet}
  PNL:         {pnl_sol:+,.4f} SOL (${pnl_usd:+,.2f})
  Trades:      {total_trades} ({win_count} wins / {loss_count} losses)
  Win Rate:    {win_rate:.1f}%
================================================================================
"""

    def format(self, record: logging.LogRecord) -> str:
        if hasattr(record, "snapshot"):
            return self._format_snapshot(record.snapshot, getattr(record, "kol", None))
        return super().format(record)

    def _format_snapshot(self, snapshot: PnlSnapshot, kol: str | None) -> str:
        return self.SNAPSHOT_FORMAT.format(
            timestamp=snapshot.fetched_at.strftime("%Y-%m-%d %H:%M:%S"),
            month=snapshot.month_year,
            kol=kol or f"#{snapshot.kol_id}",
            wallet=snapshot.wallet_address,
            pnl_sol=snapshot.pnl_sol,
            pnl_usd=snapshot.pnl_usd,
            total_trades=snapshot.total_trades,
            win_count=snapshot.win_count,
            loss_count=snapshot.loss_count,
            win_rate=snapshot.win_rate,
        )


class SnapshotLogger:
    """Handles snapshot output to console and file."""

    def __init__(
        self,
        log_file: str | Path,
        log_level: str = "INFO",
        max_file_size_mb: int = 10,
        backup_count: int = 5,
    ):
        self.log_file = Path(log_file)
        self.log_level = getattr(logging, log_level.upper(), logging.INFO)
        self.max_file_size = max_file_size_mb * 1024 * 1024
        self.backup_count = backup_count

        self._logger = logging.getLogger("rotten_trenches.snapshots")
        self._setup_logging()

    def _setup_logging(self):
        """Configure logging handlers."""
        self._logger.setLevel(self.log_level)
        self._logger.handlers.clear()
        self._logger.propagate = False

        self.log_file.parent.mkdir(parents=True, exist_ok=True)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(self.log_level)
        console_handler.setFormatter(SnapshotFormatter())
        self._logger.addHandler(console_handler)

        file_handler = RotatingFileHandler(
            self.log_file,
            maxBytes=self.max_file_size,
            backupCount=self.backup_count,
        )
        file_handler.setLevel(self.log_level)
        file_handler.setFormatter(SnapshotFormatter())
        self._logger.addHandler(file_handler)

    def log_snapshot(self, snapshot: PnlSnapshot, kol: str | None = None):
        """Log a persisted snapshot to console and file."""
        record = self._logger.makeRecord(
            name="rotten_trenches.snapshots",
            level=logging.INFO,
            fn="",
            lno=0,
            msg="PNL snapshot saved",
            args=(),
            exc_info=None,
        )
        record.snapshot = snapshot
        record.kol = kol
        self._logger.handle(record)

    def close(self):
        """Flush and detach handlers."""
        for handler in list(self._logger.handlers):
            handler.close()
            self._logger.removeHandler(handler)


def setup_app_logging(level: str = "INFO"):
    """Set up application-wide logging."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
