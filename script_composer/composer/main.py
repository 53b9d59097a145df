"""FastAPI application -- Script Composer validation service entrypoint."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

import composer.deps as deps
from composer.api.validate import router as validate_router
from composer.settings import load_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: load settings on startup, drop them on shutdown."""
    log_level = logging.DEBUG if os.environ.get("COMPOSER_DEV_MODE") else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    deps._settings = load_settings()
    logger.info(
        "Script Composer starting with options: %s",
        deps._settings.model_dump(mode="json"),
    )

    yield

    deps._settings = None


app = FastAPI(
    title="Script Composer",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(validate_router)
