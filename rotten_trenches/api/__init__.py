"""External API clients."""

from .helius import HeliusClient, TokenMetadata
from .prices import FALLBACK_SOL_PRICE_USD, PriceClient

__all__ = [
    "HeliusClient",
    "TokenMetadata",
    "PriceClient",
    "FALLBACK_SOL_PRICE_USD",
]
