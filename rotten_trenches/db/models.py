"""SQLite database schema."""

SCHEMA = """
-- Tracked influencers; only rows with a wallet are processed by the PNL job
CREATE TABLE IF NOT EXISTS kols (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL UNIQUE,
    wallet_address TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- One PNL snapshot per KOL per calendar month, overwritten on every run
CREATE TABLE IF NOT EXISTS kol_pnl_snapshots (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    kol_id INTEGER NOT NULL REFERENCES kols(id),
    wallet_address TEXT NOT NULL,
    month_year TEXT NOT NULL,
    pnl_sol REAL NOT NULL DEFAULT 0,
    pnl_usd REAL NOT NULL DEFAULT 0,
    win_count INTEGER NOT NULL DEFAULT 0,
    loss_count INTEGER NOT NULL DEFAULT 0,
    total_trades INTEGER NOT NULL DEFAULT 0,
    win_rate REAL NOT NULL DEFAULT 0,
    fetched_at TIMESTAMP NOT NULL,
    UNIQUE (kol_id, month_year)
);

CREATE INDEX IF NOT EXISTS idx_kols_wallet ON kols(wallet_address);
CREATE INDEX IF NOT EXISTS idx_pnl_snapshots_month ON kol_pnl_snapshots(month_year);
"""
