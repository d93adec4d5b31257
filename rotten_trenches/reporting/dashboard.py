"""Console dashboard for displaying wallet PNL and trade feeds."""

from dataclasses import dataclass, field
from datetime import datetime

from ..jobs.trades_feed import TradesFeed
from ..pnl import Position, WalletPnl

GREEN = "\033[92m"
RED = "\033[91m"
RESET = "\033[0m"


@dataclass
class WalletReport:
    """Everything the dashboard shows for one wallet."""

    pnl: WalletPnl
    sol_price_usd: float
    username: str | None = None
    window_hours: int | None = None
    open_positions: dict[str, Position] = field(default_factory=dict)


def format_sol(value: float) -> str:
    """Format a SOL amount with sign."""
    if value >= 0:
        return f"{value:,.4f} SOL"
    return f"-{abs(value):,.4f} SOL"


def format_currency(value: float) -> str:
    """Format a number as currency."""
    if value >= 0:
        return f"${value:,.2f}"
    return f"-${abs(value):,.2f}"


def colorize(text: str, value: float) -> str:
    return f"{GREEN if value >= 0 else RED}{text}{RESET}"


def create_bar(value: float, max_value: float, width: int = 20) -> str:
    """Create a simple ASCII progress bar."""
    if max_value <= 0:
        return " " * width
    filled = int((value / max_value) * width)
    filled = max(0, min(filled, width))
    return "█" * filled + "░" * (width - filled)


def print_header(title: str, width: int = 80):
    """Print a section header."""
    print()
    print("═" * width)
    print(f"  {title}")
    print("═" * width)


def print_banner(title: str, width: int = 78):
    print()
    print("╔" + "═" * width + "╗")
    print("║" + f" {title} ".center(width) + "║")
    print("╚" + "═" * width + "╝")


def print_wallet_report(report: WalletReport):
    """Print the PNL dashboard for one wallet."""
    pnl = report.pnl

    print_banner("KOL WALLET PNL")

    print_header("WALLET")
    print(f"  Address:    {pnl.address}")
    if report.username:
        print(f"  KOL:        @{report.username}")
    if report.window_hours is not None:
        print(f"  Window:     last {report.window_hours} hours")
    else:
        print("  Window:     all fetched transactions")
    print(f"  SOL Price:  {format_currency(report.sol_price_usd)}")

    print_header("PERFORMANCE")

    pnl_sol = colorize(f"{format_sol(pnl.pnl_sol):>18}", pnl.pnl_sol)
    pnl_usd = colorize(
        f"{format_currency(pnl.pnl_usd(report.sol_price_usd)):>18}", pnl.pnl_sol
    )

    print(f"""
  ┌────────────────────────┬────────────────────────┬────────────────────────┐
  │   REALIZED PNL         │   PNL (USD)            │   TRADES               │
  │   {pnl_sol}   │   {pnl_usd}   │   {pnl.total_trades:>18,}   │
  └────────────────────────┴────────────────────────┴────────────────────────┘
    """)

    print(f"    Win Rate:   {pnl.win_rate:>6.1f}%  {create_bar(pnl.win_rate, 100.0, 15)}")
    print(f"    Wins:       {pnl.win_count:>6}")
    print(f"    Losses:     {pnl.loss_count:>6}")

    if report.open_positions:
        print_header("OPEN POSITIONS")
        print()
        print("    Mint                                          Tokens      Cost (SOL)")
        print("    " + "─" * 72)
        positions = sorted(
            report.open_positions.items(),
            key=lambda item: item[1].total_cost_sol,
            reverse=True,
        )
        for mint, position in positions[:10]:
            print(
                f"    {mint:<44} {position.token_amount:>12,.2f} {position.total_cost_sol:>12.4f}"
            )

    print()
    print("─" * 80)
    print(f"  Generated at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("─" * 80)
    print()


def print_trades_feed(feed: TradesFeed):
    """Print the latest trades feed."""
    print_header("LATEST TRADES")

    if feed.error:
        print(f"  {RED}{feed.error}{RESET}")
        return

    if not feed.trades:
        print("  No qualifying trades.")
        return

    print()
    print("    Time                 Side   In                       Out")
    print("    " + "─" * 72)
    for trade in feed.trades:
        when = datetime.fromtimestamp(trade.timestamp_ms / 1000).strftime("%Y-%m-%d %H:%M")
        side = colorize(f"{trade.type:<5}", 1 if trade.type == "BUY" else -1)
        token_in = f"{trade.token_in.amount:,.4g} {trade.token_in.symbol}"
        token_out = f"{trade.token_out.amount:,.4g} {trade.token_out.symbol}"
        print(f"    {when:<20} {side}  {token_in:<24} {token_out}")

    print()
    print(
        f"  Volume: {feed.volume.total:,.2f} SOL "
        f"(buy {feed.volume.buy:,.2f} / sell {feed.volume.sell:,.2f})"
    )


def print_comparison(reports: list[WalletReport]):
    """Print a comparison table of multiple wallets."""
    if not reports:
        return

    print_banner("WALLET COMPARISON", width=88)
    print()
    print(f"  {'Wallet':<22} {'PNL (SOL)':>16} {'PNL (USD)':>16} {'Win Rate':>10} {'Trades':>10}")
    print("  " + "─" * 86)

    for report in sorted(reports, key=lambda r: r.pnl.pnl_sol, reverse=True):
        p = report.pnl
        name = f"@{report.username}" if report.username else p.address[:12] + "..."
        pnl_sol = colorize(f"{p.pnl_sol:>16,.4f}", p.pnl_sol)
        pnl_usd = colorize(
            f"{format_currency(p.pnl_usd(report.sol_price_usd)):>16}", p.pnl_sol
        )
        print(f"  {name:<22} {pnl_sol} {pnl_usd} {p.win_rate:>9.1f}% {p.total_trades:>10,}")

    print()
