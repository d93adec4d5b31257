"""Trade classification and average-cost PNL accounting."""

from .accumulator import PnlAccumulator, compute_wallet_pnl, fold_transactions
from .classifier import classify_trade
from .ledger import Position, PositionLedger
from .models import (
    BUY,
    LAMPORTS_PER_SOL,
    SELL,
    SOL_MINT,
    ClassifiedTrade,
    InvalidTransactionError,
    NativeTransfer,
    TokenTransfer,
    Transaction,
    WalletPnl,
)

__all__ = [
    "BUY",
    "SELL",
    "SOL_MINT",
    "LAMPORTS_PER_SOL",
    "ClassifiedTrade",
    "InvalidTransactionError",
    "NativeTransfer",
    "TokenTransfer",
    "Transaction",
    "WalletPnl",
    "Position",
    "PositionLedger",
    "PnlAccumulator",
    "classify_trade",
    "compute_wallet_pnl",
    "fold_transactions",
]
