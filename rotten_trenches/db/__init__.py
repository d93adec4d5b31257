"""Database layer."""

from .models import SCHEMA
from .repository import Kol, PnlSnapshot, Repository

__all__ = ["SCHEMA", "Repository", "Kol", "PnlSnapshot"]
