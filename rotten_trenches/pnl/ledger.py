"""Average-cost-basis position ledger."""

import logging
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)


@dataclass
class Position:
    """Currently held quantity of one mint and what it cost."""

    total_cost_sol: float = 0.0
    token_amount: float = 0.0

    @property
    def avg_cost(self) -> float:
        if self.token_amount <= 0:
            return 0.0
        return self.total_cost_sol / self.token_amount


class PositionLedger:
    """
    Tracks open positions per token mint for a single wallet.

    One ledger is used for one wallet in one run and is fed trades in
    chronological order. Quantities and costs never go negative; a
    position is removed as soon as its quantity drains to zero.
    """

    def __init__(self):
        self._positions: dict[str, Position] = {}

    def __contains__(self, mint: str) -> bool:
        return mint in self._positions

    def __len__(self) -> int:
        return len(self._positions)

    def get(self, mint: str) -> Position | None:
        position = self._positions.get(mint)
        return replace(position) if position else None

    def positions(self) -> dict[str, Position]:
        """Snapshot of all open positions."""
        return {mint: replace(p) for mint, p in self._positions.items()}

    def apply_buy(self, mint: str, sol_cost: float, token_qty: float):
        """Add a purchase to the position for a mint."""
        position = self._positions.setdefault(mint, Position())
        position.total_cost_sol += sol_cost
        position.token_amount += token_qty

    def apply_sell(self, mint: str, sol_proceeds: float, token_qty: float) -> float:
        """
        Remove a sale from the position for a mint.

        Without a known cost basis the whole proceeds count as profit and
        the ledger is left untouched. Otherwise the sold quantity (clamped
        to what is held) is charged at the average cost.

        Returns:
            Realized PNL in SOL
        """
        position = self._positions.get(mint)
        if position is None or position.token_amount <= 0:
            logger.debug(f"No cost basis for {mint[:8]}..., proceeds count as profit")
            return sol_proceeds

        sold_qty = min(token_qty, position.token_amount)
        cost_basis = position.avg_cost * sold_qty
        realized_pnl = sol_proceeds - cost_basis

        position.token_amount -= sold_qty
        position.total_cost_sol = max(0.0, position.total_cost_sol - cost_basis)

        if position.token_amount <= 0:
            del self._positions[mint]

        return realized_pnl
