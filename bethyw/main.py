"""
Beth Yw? — FastAPI app factory with startup data loading.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bethyw import __version__
from bethyw.config import DATA_DIR, configure_logging
from bethyw.data.areas import Areas
from bethyw.data.errors import BethYwError
from bethyw.data.loader import load_all
from bethyw.api.dependencies import set_areas
from bethyw.api.router_meta import router as meta_router
from bethyw.api.router_areas import router as areas_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load all data at startup."""
    configure_logging()
    logger.info("BETHYW_DATA_DIR = %s (exists = %s)", DATA_DIR, DATA_DIR.exists())

    try:
        areas, loaded = load_all(DATA_DIR)
    except BethYwError as exc:
        logger.error("Could not import the areas reference table: %s", exc)
        areas, loaded = Areas(), []
    set_areas(areas, loaded)

    logger.info("Beth Yw? ready — %d areas, datasets: %s", len(areas), ", ".join(loaded) or "none")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Beth Yw? API",
        description="Welsh Government statistics by local authority, measure and year",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(areas_router)

    return app


app = create_app()
