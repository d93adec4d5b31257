"""Latest trades feed - a wallet's most recent sizeable swaps with token metadata."""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone

import httpx

from ..api import HeliusClient, TokenMetadata
from ..api.helius import SOL_METADATA, fallback_metadata
from ..pnl import BUY, SELL, ClassifiedTrade, Transaction, classify_trade

logger = logging.getLogger(__name__)

MIN_SOL_AMOUNT = 0.4


@dataclass
class TradeLeg:
    """One side of a swap as shown in the feed."""

    symbol: str
    amount: float
    image: str | None


@dataclass
class FeedTrade:
    """A classified swap ready for display."""

    signature: str
    timestamp_ms: int
    type: str  # BUY or SELL
    description: str
    token_in: TradeLeg
    token_out: TradeLeg
    fee: int
    success: bool


@dataclass
class Volume:
    total: float = 0.0
    buy: float = 0.0
    sell: float = 0.0


@dataclass
class TradesFeed:
    """Result of a feed request."""

    trades: list[FeedTrade] = field(default_factory=list)
    fetched_at: str | None = None
    volume: Volume = field(default_factory=Volume)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error, "trades": []}
        return {
            "trades": [
                {
                    "signature": t.signature,
                    "timestamp": t.timestamp_ms,
                    "type": t.type,
                    "description": t.description,
                    "tokenIn": asdict(t.token_in),
                    "tokenOut": asdict(t.token_out),
                    "fee": t.fee,
                    "success": t.success,
                }
                for t in self.trades
            ],
            "fetched_at": self.fetched_at,
            "volume": asdict(self.volume),
        }


def _to_feed_trade(
    tx: Transaction,
    trade: ClassifiedTrade,
    metadata: dict[str, TokenMetadata],
) -> FeedTrade:
    meta = metadata.get(trade.token_mint) or fallback_metadata(trade.token_mint)
    sol_leg = TradeLeg(symbol="SOL", amount=trade.sol_amount, image=SOL_METADATA.image)
    token_leg = TradeLeg(symbol=meta.symbol, amount=trade.token_amount, image=meta.image)

    return FeedTrade(
        signature=tx.signature,
        timestamp_ms=tx.timestamp * 1000,
        type=trade.direction,
        description=tx.description or "Token Swap",
        token_in=sol_leg if trade.is_buy else token_leg,
        token_out=token_leg if trade.is_buy else sol_leg,
        fee=tx.fee,
        success=tx.success,
    )


async def fetch_kol_trades(
    helius: HeliusClient,
    wallet: str,
    limit: int = 20,
    min_sol_amount: float = MIN_SOL_AMOUNT,
    transaction_limit: int = 100,
) -> TradesFeed:
    """
    Build the latest trades feed for a wallet.

    Swaps are classified the same way as for PNL, but trades whose SOL leg
    is below min_sol_amount are dropped. Trades keep the API order, most
    recent first.

    Args:
        helius: Helius client
        wallet: Wallet address
        limit: Maximum trades to return
        min_sol_amount: Smallest SOL leg worth showing
        transaction_limit: Transactions to scan

    Returns:
        TradesFeed; on any failure the feed is empty and carries an error
    """
    logger.info(f"Fetching transactions for wallet: {wallet}")

    try:
        return await _build_feed(helius, wallet, limit, min_sol_amount, transaction_limit)
    except httpx.HTTPError as e:
        logger.error(f"Helius tx fetch error: {e}")
        return TradesFeed(error="Failed to fetch transactions")
    except Exception as e:
        logger.error(f"Error fetching KOL trades: {e}", exc_info=True)
        return TradesFeed(error="Unknown error")


async def _build_feed(
    helius: HeliusClient,
    wallet: str,
    limit: int,
    min_sol_amount: float,
    transaction_limit: int,
) -> TradesFeed:
    transactions = await helius.get_transactions(wallet, limit=transaction_limit)

    swaps = [tx for tx in transactions if tx.type == "SWAP"]
    logger.info(f"Found {len(swaps)} SWAP transactions out of {len(transactions)}")

    mints = [tt.mint for tx in swaps for tt in tx.token_transfers]
    metadata = await helius.get_token_metadata(mints)

    feed = TradesFeed(fetched_at=datetime.now(timezone.utc).isoformat())
    for tx in swaps:
        trade = classify_trade(tx, wallet, min_sol_amount=min_sol_amount)
        if not trade:
            continue

        if trade.direction == BUY:
            feed.volume.buy += trade.sol_amount
        elif trade.direction == SELL:
            feed.volume.sell += trade.sol_amount

        feed.trades.append(_to_feed_trade(tx, trade, metadata))
        if len(feed.trades) >= limit:
            break

    feed.volume.total = feed.volume.buy + feed.volume.sell
    logger.info(
        f"Returning {len(feed.trades)} trades, total volume: {feed.volume.total:.2f} SOL"
    )
    return feed
