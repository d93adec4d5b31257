"""Tests for the console dashboard and the analyze helpers."""

import asyncio

import httpx
import pytest
from factories import MINT_A, MINT_B, WALLET, buy, mock_client, raw_buy, raw_sell

from rotten_trenches.analyze import analyze_wallet, resolve_wallet
from rotten_trenches.api import HeliusClient
from rotten_trenches.jobs import TradesFeed
from rotten_trenches.pnl import WalletPnl, fold_transactions
from rotten_trenches.reporting.dashboard import (
    WalletReport,
    create_bar,
    format_sol,
    print_comparison,
    print_trades_feed,
    print_wallet_report,
)

T0 = 1_760_000_000


def test_create_bar():
    assert create_bar(50, 100, 10) == "█████░░░░░"
    assert create_bar(5, 0, 4) == "    "
    assert create_bar(200, 100, 4) == "████"


def test_format_sol():
    assert format_sol(1.5) == "1.5000 SOL"
    assert format_sol(-0.25) == "-0.2500 SOL"


def test_print_wallet_report(capsys):
    accumulator = fold_transactions([buy("sig", T0, MINT_A, 2.0, 10)], WALLET)
    report = WalletReport(
        pnl=accumulator.totals(WALLET),
        sol_price_usd=100.0,
        username="cupsey",
        window_hours=24,
        open_positions=accumulator.ledger.positions(),
    )

    print_wallet_report(report)

    out = capsys.readouterr().out
    assert WALLET in out
    assert "@cupsey" in out
    assert "last 24 hours" in out
    assert "OPEN POSITIONS" in out
    assert MINT_A in out


def test_print_comparison(capsys):
    reports = [
        WalletReport(pnl=WalletPnl(address=WALLET, pnl_sol=-1.0, total_trades=2), sol_price_usd=100.0),
        WalletReport(
            pnl=WalletPnl(address="Other", pnl_sol=3.0, win_count=1, total_trades=2),
            sol_price_usd=100.0,
            username="orangie",
        ),
    ]

    print_comparison(reports)

    out = capsys.readouterr().out
    assert out.index("@orangie") < out.index(WALLET[:12])


def test_print_empty_feed(capsys):
    print_trades_feed(TradesFeed())
    print_trades_feed(TradesFeed(error="Failed to fetch transactions"))

    out = capsys.readouterr().out
    assert "No qualifying trades." in out
    assert "Failed to fetch transactions" in out


def test_analyze_wallet_reports_open_positions():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json=[
                raw_sell("sig-3", T0 + 120, MINT_A, 3.0, 10),
                raw_buy("sig-2", T0 + 60, MINT_B, 1.0, 40),
                raw_buy("sig-1", T0, MINT_A, 2.0, 10),
            ],
        )

    async def run():
        helius = HeliusClient("key", client=mock_client(handler))
        try:
            return await analyze_wallet(helius, WALLET, 100.0, username="cupsey")
        finally:
            await helius.close()

    report = asyncio.run(run())

    assert report.pnl.pnl_sol == pytest.approx(1.0)
    assert report.pnl.total_trades == 3
    assert list(report.open_positions) == [MINT_B]
    assert report.username == "cupsey"


def test_resolve_wallet_accepts_addresses():
    address, username = asyncio.run(resolve_wallet(WALLET, None))

    assert address == WALLET
    assert username is None


def test_resolve_wallet_unknown_username():
    with pytest.raises(ValueError):
        asyncio.run(resolve_wallet("@nobody", None))
