"""Batch job and feed built on the PNL core."""

from .pnl_job import JobResult, KolResult, PnlJob, month_key
from .trades_feed import FeedTrade, TradeLeg, TradesFeed, fetch_kol_trades

__all__ = [
    "PnlJob",
    "JobResult",
    "KolResult",
    "month_key",
    "fetch_kol_trades",
    "TradesFeed",
    "FeedTrade",
    "TradeLeg",
]
