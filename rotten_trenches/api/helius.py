"""Client for the Helius API - fetches parsed wallet transactions and token metadata."""

import logging
from dataclasses import dataclass

import httpx

from ..pnl.models import SOL_MINT, InvalidTransactionError, Transaction

logger = logging.getLogger(__name__)

SOL_DECIMALS = 9
SOL_IMAGE = (
    "https://raw.githubusercontent.com/solana-labs/token-list/main/assets/"
    "mainnet/So11111111111111111111111111111111111111112/logo.png"
)


@dataclass
class TokenMetadata:
    """Display metadata for a token mint."""

    symbol: str
    name: str
    image: str | None
    decimals: int


SOL_METADATA = TokenMetadata(
    symbol="SOL",
    name="Solana",
    image=SOL_IMAGE,
    decimals=SOL_DECIMALS,
)


def fallback_metadata(mint: str) -> TokenMetadata:
    """Metadata for a mint the DAS API knows nothing about."""
    return TokenMetadata(symbol=mint[:6], name=mint[:6], image=None, decimals=6)


class HeliusClient:
    """Client for the Helius enhanced transactions and DAS APIs."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.helius.xyz",
        rpc_url: str = "https://mainnet.helius-rpc.com",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.rpc_url = rpc_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def close(self):
        """Close the HTTP client."""
        await self._client.aclose()

    async def get_transactions(self, address: str, limit: int = 100) -> list[Transaction]:
        """
        Fetch the most recent parsed transactions for a wallet.

        Records that cannot be parsed are skipped individually.

        Args:
            address: Wallet address (base58)
            limit: Maximum number of transactions (API max 100)

        Returns:
            Transactions in API order (most recent first)

        Raises:
            httpx.HTTPStatusError: if the API returns a non-success status
            httpx.DecodingError: if the response body is not JSON
        """
        response = await self._client.get(
            f"{self.base_url}/v0/addresses/{address}/transactions",
            params={"api-key": self.api_key, "limit": min(limit, 100)},
        )
        response.raise_for_status()

        try:
            data = response.json()
        except ValueError as e:
            raise httpx.DecodingError(
                f"Invalid JSON in transactions response: {e}", request=response.request
            ) from e

        if not isinstance(data, list):
            logger.warning(f"Unexpected transactions payload for {address[:8]}...")
            return []

        transactions = []
        for item in data:
            try:
                transactions.append(Transaction.from_api(item))
            except InvalidTransactionError as e:
                logger.debug(f"Skipping transaction: {e}")
                continue

        return transactions

    async def get_token_metadata(self, mints: list[str]) -> dict[str, TokenMetadata]:
        """
        Fetch symbol, name, image and decimals for a batch of mints.

        SOL is always present. Lookup failures are logged and leave the
        affected mints out of the result.

        Args:
            mints: Token mint addresses

        Returns:
            Mapping of mint to TokenMetadata
        """
        result = {SOL_MINT: SOL_METADATA}

        to_fetch = list(dict.fromkeys(m for m in mints if m and m != SOL_MINT))
        if not to_fetch:
            return result

        try:
            response = await self._client.post(
                f"{self.rpc_url}/",
                params={"api-key": self.api_key},
                json={
                    "jsonrpc": "2.0",
                    "id": "token-metadata",
                    "method": "getAssetBatch",
                    "params": {"ids": to_fetch},
                },
            )
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching token metadata: {e}")
            return result

        assets = data.get("result") if isinstance(data, dict) else None
        if not isinstance(assets, list):
            return result

        for asset in assets:
            if not isinstance(asset, dict) or not asset.get("id"):
                continue
            mint = asset["id"]
            content = asset.get("content") or {}
            metadata = content.get("metadata") or {}
            token_info = asset.get("token_info") or {}
            files = content.get("files") or []

            symbol = _clean(metadata.get("symbol")) or _clean(token_info.get("symbol"))
            name = _clean(metadata.get("name")) or _clean(token_info.get("name"))
            image = (content.get("links") or {}).get("image") or (
                files[0].get("uri") if files and isinstance(files[0], dict) else None
            )
            decimals = token_info.get("decimals")

            result[mint] = TokenMetadata(
                symbol=symbol or mint[:6],
                name=name or symbol or mint[:6],
                image=image,
                decimals=decimals if isinstance(decimals, int) else 6,
            )

        return result


def _clean(value) -> str | None:
    if not isinstance(value, str):
        return None
    return value.strip() or None
