"""HTTP trigger surface for the PNL job and the latest trades feed."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import HeliusClient, PriceClient
from .config import Config
from .db import Repository
from .jobs import PnlJob, fetch_kol_trades
from .reporting.logger import SnapshotLogger

logger = logging.getLogger(__name__)


def create_app(
    config: Config,
    helius: HeliusClient | None = None,
    prices: PriceClient | None = None,
) -> FastAPI:
    """
    Build the FastAPI app.

    Clients can be injected for tests; otherwise they are created from
    the config and closed on shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        repository = Repository(config.database.path)
        await repository.initialize()

        helius_client = helius or HeliusClient(
            config.helius_api_key or "",
            base_url=config.api.helius_base,
            rpc_url=config.api.helius_rpc,
            timeout=config.api.timeout_seconds,
        )
        price_client = prices or PriceClient(config.api.price_api)
        snapshot_logger = SnapshotLogger(
            log_file=config.logging.file,
            log_level=config.logging.level,
            max_file_size_mb=config.logging.max_file_size_mb,
            backup_count=config.logging.backup_count,
        )

        app.state.repository = repository
        app.state.helius = helius_client
        app.state.job = PnlJob(
            config, repository, helius_client, price_client, snapshot_logger
        )
        yield

        snapshot_logger.close()
        if helius is None:
            await helius_client.close()
        if prices is None:
            await price_client.close()
        await repository.close()

    app = FastAPI(title="Rotten Trenches PNL", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.post("/fetch-pnl-data")
    async def fetch_pnl_data(request: Request):
        result = await request.app.state.job.run()
        return JSONResponse(result.to_dict(), status_code=200 if result.success else 500)

    @app.post("/fetch-kol-trades")
    async def fetch_kol_trades_endpoint(request: Request):
        try:
            body = await request.json()
        except ValueError:
            body = {}
        wallet = body.get("walletAddress") if isinstance(body, dict) else None

        if not wallet:
            return JSONResponse({"error": "Wallet address is required"}, status_code=400)

        if not config.helius_api_key:
            return JSONResponse(
                {"error": "Helius API key not configured"}, status_code=500
            )

        feed = await fetch_kol_trades(
            request.app.state.helius,
            wallet,
            limit=config.job.feed_limit,
            min_sol_amount=config.job.min_feed_sol_amount,
            transaction_limit=config.api.transaction_limit,
        )
        return JSONResponse(feed.to_dict())

    return app
