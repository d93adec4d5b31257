"""Trade classifier - turns a swap transaction into a BUY or SELL."""

from .models import BUY, SELL, SOL_MINT, ClassifiedTrade, TokenTransfer, Transaction


def classify_trade(
    tx: Transaction,
    wallet: str,
    min_sol_amount: float = 0.0,
) -> ClassifiedTrade | None:
    """
    Classify a transaction from the point of view of a tracked wallet.

    Only SWAP transactions qualify. A swap is a BUY when the wallet spent
    SOL and received a token, and a SELL when it received SOL and sent a
    token. BUY is checked first, so a swap is never both.

    When several non-SOL mints move in the same direction, the transfer
    with the largest token amount is taken as the traded token.

    Args:
        tx: Parsed transaction
        wallet: Address of the tracked wallet
        min_sol_amount: Ignore trades whose SOL leg is below this size

    Returns:
        ClassifiedTrade, or None if the transaction is not a qualifying trade
    """
    if tx.type != "SWAP":
        return None

    sol_spent = 0.0
    sol_received = 0.0
    for nt in tx.native_transfers:
        if nt.from_account == wallet:
            sol_spent += nt.sol_amount
        if nt.to_account == wallet:
            sol_received += nt.sol_amount

    bought: TokenTransfer | None = None
    sold: TokenTransfer | None = None
    for tt in tx.token_transfers:
        if not tt.mint or tt.mint == SOL_MINT:
            continue
        if tt.to_account == wallet and tt.token_amount > 0:
            if bought is None or tt.token_amount > bought.token_amount:
                bought = tt
        if tt.from_account == wallet and tt.token_amount > 0:
            if sold is None or tt.token_amount > sold.token_amount:
                sold = tt

    if sol_spent > 0 and sol_spent >= min_sol_amount and bought:
        return ClassifiedTrade(
            direction=BUY,
            sol_amount=sol_spent,
            token_mint=bought.mint,
            token_amount=bought.token_amount,
            signature=tx.signature,
            timestamp=tx.timestamp,
        )

    if sol_received > 0 and sol_received >= min_sol_amount and sold:
        return ClassifiedTrade(
            direction=SELL,
            sol_amount=sol_received,
            token_mint=sold.mint,
            token_amount=sold.token_amount,
            signature=tx.signature,
            timestamp=tx.timestamp,
        )

    return None
