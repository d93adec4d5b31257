"""PNL accumulator - folds classified trades into wallet totals."""

import logging
from collections.abc import Iterable

from .classifier import classify_trade
from .ledger import PositionLedger
from .models import ClassifiedTrade, Transaction, WalletPnl

logger = logging.getLogger(__name__)


class PnlAccumulator:
    """
    Accumulates realized PNL and win/loss counts for one wallet.

    Every classified trade counts toward total_trades. Only sells realize
    PNL; a sell wins when its realized PNL is strictly positive, so a
    break-even sell is a loss.
    """

    def __init__(self, ledger: PositionLedger | None = None):
        self.ledger = ledger or PositionLedger()
        self.pnl_sol = 0.0
        self.win_count = 0
        self.loss_count = 0
        self.total_trades = 0

    def apply(self, trade: ClassifiedTrade) -> float | None:
        """
        Apply one trade.

        Returns:
            Realized PNL for a sell, None for a buy
        """
        self.total_trades += 1

        if trade.is_buy:
            self.ledger.apply_buy(trade.token_mint, trade.sol_amount, trade.token_amount)
            logger.debug(
                f"BUY: Spent {trade.sol_amount:.4f} SOL for {trade.token_amount} "
                f"of {trade.token_mint[:8]}..."
            )
            return None

        realized_pnl = self.ledger.apply_sell(
            trade.token_mint, trade.sol_amount, trade.token_amount
        )
        self.pnl_sol += realized_pnl
        if realized_pnl > 0:
            self.win_count += 1
        else:
            self.loss_count += 1

        logger.debug(
            f"SELL: Received {trade.sol_amount:.4f} SOL for {trade.token_amount} "
            f"of {trade.token_mint[:8]}..., PNL: {realized_pnl:.4f} SOL"
        )
        return realized_pnl

    def totals(self, address: str) -> WalletPnl:
        return WalletPnl(
            address=address,
            pnl_sol=self.pnl_sol,
            win_count=self.win_count,
            loss_count=self.loss_count,
            total_trades=self.total_trades,
        )


def fold_transactions(
    transactions: Iterable[Transaction],
    wallet: str,
    since_timestamp: int | None = None,
) -> PnlAccumulator:
    """
    Fold a wallet's transaction history into a fresh accumulator.

    Transactions are folded oldest first regardless of the order they
    arrive in, since the average cost at the time of each sale depends on
    the buys that preceded it.

    Args:
        transactions: Parsed transactions in any order
        wallet: Address of the tracked wallet
        since_timestamp: Only count transactions at or after this Unix time

    Returns:
        PnlAccumulator holding the totals and the open positions
    """
    txs = list(transactions)
    if since_timestamp is not None:
        txs = [tx for tx in txs if tx.timestamp >= since_timestamp]

    # Stable sort on the reversed list keeps newest-first ties in
    # chronological order.
    txs = sorted(reversed(txs), key=lambda tx: tx.timestamp)

    accumulator = PnlAccumulator()
    for tx in txs:
        trade = classify_trade(tx, wallet)
        if trade:
            accumulator.apply(trade)

    return accumulator


def compute_wallet_pnl(
    transactions: Iterable[Transaction],
    wallet: str,
    since_timestamp: int | None = None,
) -> WalletPnl:
    """Compute realized PNL totals for a wallet from its transaction history."""
    return fold_transactions(transactions, wallet, since_timestamp).totals(wallet)
