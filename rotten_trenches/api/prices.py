"""Client for the Jupiter price API - fetches the SOL spot price."""

import logging
import math

import httpx

from ..pnl.models import SOL_MINT

logger = logging.getLogger(__name__)

FALLBACK_SOL_PRICE_USD = 150.0


class PriceClient:
    """Client for Jupiter Price API v2."""

    def __init__(
        self,
        url: str = "https://api.jup.ag/price/v2",
        timeout: float = 15.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.url = url
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self):
        await self._client.aclose()

    async def get_sol_price(self, fallback: float = FALLBACK_SOL_PRICE_USD) -> float:
        """
        Get the current SOL price in USD.

        Never raises: any failure, or a response without a usable price,
        returns the fallback.
        """
        try:
            response = await self._client.get(self.url, params={"ids": SOL_MINT})
            response.raise_for_status()
            data = response.json()
            price = float(data["data"][SOL_MINT]["price"])
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
            logger.error(f"Failed to fetch SOL price, using fallback ${fallback}: {e}")
            return fallback

        if not math.isfinite(price) or price <= 0:
            logger.warning(f"SOL price {price} is not usable, using fallback ${fallback}")
            return fallback

        logger.info(f"Current SOL price: ${price:,.2f}")
        return price
