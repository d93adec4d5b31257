"""Rotten Trenches - realized PNL tracking for crypto KOL wallets."""

__version__ = "0.1.0"
