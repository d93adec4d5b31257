"""Logging and console output."""

from .logger import SnapshotFormatter, SnapshotLogger, setup_app_logging

__all__ = ["SnapshotFormatter", "SnapshotLogger", "setup_app_logging"]
