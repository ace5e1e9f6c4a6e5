"""FoodOrder API service entrypoint."""

import logging
import os

from fastapi import FastAPI

from services.api.app.db.init_db import init_db
from services.api.app.routers.catalog import router as catalog_router
from services.api.app.routers.metrics import router as metrics_router
from services.api.app.routers.order import router as order_router


def configure_logging() -> None:
    level = os.getenv("FOODORDER_LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


app = FastAPI(title="FoodOrder API")

app.include_router(order_router)
app.include_router(catalog_router)
app.include_router(metrics_router)


@app.on_event("startup")
def _startup() -> None:
    configure_logging()
    init_db()


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
