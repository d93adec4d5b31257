"""Tests for classifying swaps into BUY and SELL trades."""

import pytest
from factories import (
    MINT_A,
    MINT_B,
    POOL,
    WALLET,
    buy,
    native,
    raw_swap,
    sell,
    token,
    wrapped_sol,
)

from rotten_trenches.pnl import BUY, SELL, Transaction, classify_trade


def tx(**kwargs) -> Transaction:
    return Transaction.from_api(raw_swap("sig", 1_700_000_000, **kwargs))


def test_buy_is_classified():
    trade = classify_trade(buy("sig-buy", 1_700_000_000, MINT_A, 2.0, 10), WALLET)

    assert trade is not None
    assert trade.direction == BUY
    assert trade.sol_amount == pytest.approx(2.0)
    assert trade.token_mint == MINT_A
    assert trade.token_amount == 10
    assert trade.signature == "sig-buy"


def test_sell_is_classified():
    trade = classify_trade(sell("sig-sell", 1_700_000_000, MINT_A, 3.0, 10), WALLET)

    assert trade is not None
    assert trade.direction == SELL
    assert trade.sol_amount == pytest.approx(3.0)
    assert trade.token_amount == 10


@pytest.mark.parametrize("tx_type", ["TRANSFER", "NFT_SALE", "UNKNOWN", "swap"])
def test_non_swap_is_never_a_trade(tx_type):
    raw = raw_swap(
        "sig",
        1_700_000_000,
        native_transfers=[native(WALLET, POOL, 1.0)],
        token_transfers=[token(MINT_A, POOL, WALLET, 100)],
        type=tx_type,
    )

    assert classify_trade(Transaction.from_api(raw), WALLET) is None


def test_buy_takes_precedence_over_sell():
    trade = classify_trade(
        tx(
            native_transfers=[native(WALLET, POOL, 1.0), native(POOL, WALLET, 5.0)],
            token_transfers=[
                token(MINT_A, POOL, WALLET, 100),
                token(MINT_B, WALLET, POOL, 50),
            ],
        ),
        WALLET,
    )

    assert trade.direction == BUY
    assert trade.sol_amount == pytest.approx(1.0)
    assert trade.token_mint == MINT_A


def test_falls_back_to_sell_when_nothing_was_bought():
    trade = classify_trade(
        tx(
            native_transfers=[native(WALLET, POOL, 0.01), native(POOL, WALLET, 2.0)],
            token_transfers=[token(MINT_A, WALLET, POOL, 40)],
        ),
        WALLET,
    )

    assert trade.direction == SELL
    assert trade.sol_amount == pytest.approx(2.0)


def test_largest_token_transfer_wins():
    trade = classify_trade(
        tx(
            native_transfers=[native(WALLET, POOL, 1.0)],
            token_transfers=[
                token(MINT_A, POOL, WALLET, 10),
                token(MINT_B, POOL, WALLET, 250),
            ],
        ),
        WALLET,
    )

    assert trade.token_mint == MINT_B
    assert trade.token_amount == 250


def test_wrapped_sol_is_not_a_traded_token():
    trade = classify_trade(
        tx(
            native_transfers=[native(WALLET, POOL, 1.0)],
            token_transfers=[wrapped_sol(POOL, WALLET, 1000)],
        ),
        WALLET,
    )

    assert trade is None


def test_native_amounts_are_summed():
    trade = classify_trade(
        tx(
            native_transfers=[
                native(WALLET, POOL, 0.5),
                native(WALLET, "FeeAccount", 0.25),
                native("Someone", "SomeoneElse", 9.0),
            ],
            token_transfers=[token(MINT_A, POOL, WALLET, 10)],
        ),
        WALLET,
    )

    assert trade.sol_amount == pytest.approx(0.75)


def test_swap_without_sol_leg_is_ignored():
    trade = classify_trade(
        tx(token_transfers=[token(MINT_A, WALLET, POOL, 10), token(MINT_B, POOL, WALLET, 20)]),
        WALLET,
    )

    assert trade is None


def test_transfers_of_other_wallets_are_ignored():
    trade = classify_trade(buy("sig", 1_700_000_000, MINT_A, 1.0, 10), "SomeOtherWallet")

    assert trade is None


def test_min_sol_amount_filters_small_trades():
    small = buy("sig", 1_700_000_000, MINT_A, 0.3, 10)

    assert classify_trade(small, WALLET) is not None
    assert classify_trade(small, WALLET, min_sol_amount=0.4) is None


def test_missing_transfer_arrays_are_empty():
    transaction = Transaction.from_api(
        {"signature": "sig", "timestamp": 1_700_000_000, "type": "SWAP"}
    )

    assert transaction.native_transfers == []
    assert transaction.token_transfers == []
    assert classify_trade(transaction, WALLET) is None
