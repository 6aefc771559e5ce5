from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Dict, Optional, Union

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from sales_tracker.config import load_config, with_defaults
from sales_tracker.core.store import TransactionStore
from sales_tracker.database import SQLiteTransactionStore
from sales_tracker.errors import InvalidMonth, SalesTrackerError, UpstreamSeedFailure
from sales_tracker.report import (
    category_summary,
    combined_report,
    price_range_summary,
    sales_summary,
)
from sales_tracker.seed import seed_if_empty
from sales_tracker.selection import search_month

logger = logging.getLogger(__name__)


class SearchRequest(BaseModel):
    searchValue: Optional[Union[str, int, float]] = None


def _query_text(value: Union[str, int, float, None]) -> Optional[str]:
    if value is None or isinstance(value, str):
        return value
    # 0 and false carry no search text
    if not value:
        return None
    return str(value)


def get_store(request: Request) -> TransactionStore:
    return request.app.state.store


def create_app(
    config: Optional[Dict[str, object]] = None,
    store: Optional[TransactionStore] = None,
) -> FastAPI:
    """Build the HTTP API around one lifecycle-managed transaction store.

    The store is opened (and seeded when ``seed_on_startup`` is set) before
    the first request and closed on shutdown.
    """
    cfg = with_defaults(config) if config is not None else load_config()
    seed_url = str(cfg["seed_url"])
    seed_timeout = float(cfg["seed_timeout"])

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store.open()
        if cfg.get("seed_on_startup"):
            try:
                seed_if_empty(app.state.store, seed_url, seed_timeout)
            except UpstreamSeedFailure:
                logger.exception("Startup seed failed; GET /home will retry")
        try:
            yield
        finally:
            app.state.store.close()

    app = FastAPI(title="Salesboard API", version="0.1.0", lifespan=lifespan)
    app.state.store = store if store is not None else SQLiteTransactionStore(str(cfg["db_path"]))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(cfg.get("cors_origins") or ["*"]),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, request.url.path)
            response = JSONResponse(status_code=500, content={"error": "Internal Server Error"})
        elapsed = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s %d %.1f ms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        return response

    @app.exception_handler(InvalidMonth)
    async def invalid_month(request: Request, exc: InvalidMonth):
        return JSONResponse(status_code=400, content={"error": "Invalid month name"})

    @app.exception_handler(SalesTrackerError)
    async def server_error(request: Request, exc: SalesTrackerError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/home")
    def home(store: TransactionStore = Depends(get_store)):
        seed_if_empty(store, seed_url, seed_timeout)
        return [tx.to_payload() for tx in store.find_all()]

    @app.post("/search/{month_name}")
    def search(
        month_name: str,
        body: Optional[SearchRequest] = None,
        store: TransactionStore = Depends(get_store),
    ):
        query = _query_text(body.searchValue) if body else None
        return [r.detail() for r in search_month(store, month_name, query)]

    @app.get("/data/{month_name}")
    def data(month_name: str, store: TransactionStore = Depends(get_store)):
        return sales_summary(store, month_name)

    @app.get("/bar-chart/{month_name}")
    def bar_chart(month_name: str, store: TransactionStore = Depends(get_store)):
        return price_range_summary(store, month_name)

    @app.get("/pie-chart/{month_name}")
    def pie_chart(month_name: str, store: TransactionStore = Depends(get_store)):
        return category_summary(store, month_name)

    @app.get("/statistic/{month_name}")
    def statistic(month_name: str, store: TransactionStore = Depends(get_store)):
        return combined_report(store, month_name)

    return app
