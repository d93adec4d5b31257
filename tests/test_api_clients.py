"""Tests for the Helius and Jupiter clients against mocked HTTP."""

import asyncio

import httpx
import pytest
from factories import MINT_A, MINT_B, WALLET, mock_client, raw_buy

from rotten_trenches.api import HeliusClient, PriceClient
from rotten_trenches.pnl import SOL_MINT


def test_get_transactions_parses_and_skips_bad_records():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(
            200,
            json=[
                raw_buy("sig-1", 1_700_000_000, MINT_A, 1.0, 10),
                {"type": "SWAP"},
                "garbage",
            ],
        )

    async def run():
        helius = HeliusClient("key", client=mock_client(handler))
        try:
            return await helius.get_transactions(WALLET, limit=500)
        finally:
            await helius.close()

    transactions = asyncio.run(run())

    assert [tx.signature for tx in transactions] == ["sig-1"]
    assert seen["path"] == f"/v0/addresses/{WALLET}/transactions"
    assert seen["params"] == {"api-key": "key", "limit": "100"}


def test_get_transactions_raises_on_error_status():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(429, json={"error": "rate limited"})

    async def run():
        helius = HeliusClient("key", client=mock_client(handler))
        try:
            await helius.get_transactions(WALLET)
        finally:
            await helius.close()

    with pytest.raises(httpx.HTTPStatusError):
        asyncio.run(run())


def test_get_transactions_non_list_payload_is_empty():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"message": "unexpected"})

    async def run():
        helius = HeliusClient("key", client=mock_client(handler))
        try:
            return await helius.get_transactions(WALLET)
        finally:
            await helius.close()

    assert asyncio.run(run()) == []


def test_get_transactions_non_json_body_raises_http_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>gateway</html>")

    async def run():
        helius = HeliusClient("key", client=mock_client(handler))
        try:
            await helius.get_transactions(WALLET)
        finally:
            await helius.close()

    with pytest.raises(httpx.DecodingError):
        asyncio.run(run())


def test_get_token_metadata():
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(
            200,
            json={
                "result": [
                    {
                        "id": MINT_A,
                        "content": {
                            "metadata": {"symbol": " BONK ", "name": "Bonk"},
                            "links": {"image": "https://img.example/bonk.png"},
                        },
                        "token_info": {"decimals": 5},
                    },
                    {
                        "id": MINT_B,
                        "content": {"files": [{"uri": "https://img.example/b.png"}]},
                        "token_info": {"symbol": "BEE"},
                    },
                    {"content": {}},
                ]
            },
        )

    async def run():
        helius = HeliusClient("key", client=mock_client(handler))
        try:
            return await helius.get_token_metadata([MINT_A, MINT_B, MINT_A, SOL_MINT, ""])
        finally:
            await helius.close()

    metadata = asyncio.run(run())

    assert len(requests) == 1
    assert b'"getAssetBatch"' in requests[0].content
    assert metadata[SOL_MINT].symbol == "SOL"
    assert metadata[MINT_A].symbol == "BONK"
    assert metadata[MINT_A].name == "Bonk"
    assert metadata[MINT_A].image == "https://img.example/bonk.png"
    assert metadata[MINT_A].decimals == 5
    assert metadata[MINT_B].symbol == "BEE"
    assert metadata[MINT_B].name == "BEE"
    assert metadata[MINT_B].image == "https://img.example/b.png"
    assert metadata[MINT_B].decimals == 6


def test_get_token_metadata_failure_keeps_sol():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    async def run():
        helius = HeliusClient("key", client=mock_client(handler))
        try:
            return await helius.get_token_metadata([MINT_A])
        finally:
            await helius.close()

    metadata = asyncio.run(run())

    assert list(metadata) == [SOL_MINT]


def test_get_token_metadata_skips_request_for_sol_only():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    async def run():
        helius = HeliusClient("key", client=mock_client(handler))
        try:
            return await helius.get_token_metadata([SOL_MINT])
        finally:
            await helius.close()

    assert list(asyncio.run(run())) == [SOL_MINT]


def _price(handler, fallback: float = 150.0) -> float:
    async def run():
        prices = PriceClient(client=mock_client(handler))
        try:
            return await prices.get_sol_price(fallback)
        finally:
            await prices.close()

    return asyncio.run(run())


def test_sol_price():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["ids"] == SOL_MINT
        return httpx.Response(200, json={"data": {SOL_MINT: {"id": SOL_MINT, "price": "187.25"}}})

    assert _price(handler) == pytest.approx(187.25)


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, text="unavailable"),
        httpx.Response(200, json={"data": {}}),
        httpx.Response(200, json={"data": {SOL_MINT: {"price": None}}}),
        httpx.Response(200, json={"data": {SOL_MINT: {"price": 0}}}),
        httpx.Response(200, json={"data": {SOL_MINT: {"price": "Infinity"}}}),
        httpx.Response(200, json={"data": {SOL_MINT: {"price": "NaN"}}}),
        httpx.Response(200, text="not json"),
    ],
)
def test_sol_price_falls_back(response):
    assert _price(lambda request: response, fallback=123.0) == 123.0


def test_sol_price_falls_back_on_network_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    assert _price(handler) == 150.0
