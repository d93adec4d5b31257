"""Data types for swap transactions, classified trades and wallet PNL."""

import math
from dataclasses import dataclass, field

SOL_MINT = "So11111111111111111111111111111111111111112"
LAMPORTS_PER_SOL = 10**9

BUY = "BUY"
SELL = "SELL"


class InvalidTransactionError(ValueError):
    """Raised when a raw transaction record cannot be used at all."""


def to_number(value) -> float:
    """Coerce an API value to a finite float, 0 otherwise."""
    if isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


@dataclass
class NativeTransfer:
    """A SOL transfer inside a transaction."""

    from_account: str
    to_account: str
    amount: int  # lamports

    @property
    def sol_amount(self) -> float:
        return self.amount / LAMPORTS_PER_SOL


@dataclass
class TokenTransfer:
    """An SPL token transfer inside a transaction."""

    mint: str
    from_account: str
    to_account: str
    token_amount: float  # whole tokens, already scaled by decimals


@dataclass
class Transaction:
    """A parsed transaction as returned by the Helius enhanced API."""

    signature: str
    timestamp: int  # Unix seconds
    type: str  # SWAP, TRANSFER, ...
    native_transfers: list[NativeTransfer] = field(default_factory=list)
    token_transfers: list[TokenTransfer] = field(default_factory=list)
    description: str | None = None
    fee: int = 0
    success: bool = True

    @classmethod
    def from_api(cls, item: dict) -> "Transaction":
        """
        Build a transaction from a raw API record.

        Missing or malformed transfer arrays become empty lists and
        unusable transfer entries are dropped. Only a record without a
        signature or timestamp is rejected.

        Raises:
            InvalidTransactionError: if the record itself is unusable
        """
        if not isinstance(item, dict):
            raise InvalidTransactionError(f"Expected an object, got {type(item).__name__}")

        signature = item.get("signature")
        if not signature or not isinstance(signature, str):
            raise InvalidTransactionError("Transaction has no signature")

        ts = item.get("timestamp")
        if isinstance(ts, bool) or not isinstance(ts, (int, float)) or not math.isfinite(ts):
            raise InvalidTransactionError(f"Transaction {signature} has no valid timestamp")

        native_transfers = []
        for nt in _as_list(item.get("nativeTransfers")):
            if not isinstance(nt, dict):
                continue
            from_account = nt.get("fromUserAccount") or ""
            to_account = nt.get("toUserAccount") or ""
            if not isinstance(from_account, str) or not isinstance(to_account, str):
                continue
            native_transfers.append(
                NativeTransfer(
                    from_account=from_account,
                    to_account=to_account,
                    amount=int(to_number(nt.get("amount"))),
                )
            )

        token_transfers = []
        for tt in _as_list(item.get("tokenTransfers")):
            if not isinstance(tt, dict):
                continue
            mint = tt.get("mint")
            from_account = tt.get("fromUserAccount") or ""
            to_account = tt.get("toUserAccount") or ""
            if not mint or not isinstance(mint, str):
                continue
            if not isinstance(from_account, str) or not isinstance(to_account, str):
                continue
            token_transfers.append(
                TokenTransfer(
                    mint=mint,
                    from_account=from_account,
                    to_account=to_account,
                    token_amount=to_number(tt.get("tokenAmount")),
                )
            )

        return cls(
            signature=signature,
            timestamp=int(ts),
            type=item.get("type") or "UNKNOWN",
            native_transfers=native_transfers,
            token_transfers=token_transfers,
            description=item.get("description") or None,
            fee=int(to_number(item.get("fee"))),
            success=item.get("transactionError") is None,
        )


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


@dataclass
class ClassifiedTrade:
    """A swap reduced to one side of a SOL <-> token trade."""

    direction: str  # BUY or SELL
    sol_amount: float  # SOL spent (BUY) or received (SELL)
    token_mint: str
    token_amount: float
    signature: str
    timestamp: int

    @property
    def is_buy(self) -> bool:
        return self.direction == BUY


@dataclass
class WalletPnl:
    """Realized PNL totals for one wallet over one run."""

    address: str
    pnl_sol: float = 0.0
    win_count: int = 0
    loss_count: int = 0
    total_trades: int = 0

    @property
    def win_rate(self) -> float:
        """Winning sells as a percentage of all classified trades."""
        if self.total_trades == 0:
            return 0.0
        return self.win_count / self.total_trades * 100

    def pnl_usd(self, sol_price_usd: float) -> float:
        return self.pnl_sol * sol_price_usd
