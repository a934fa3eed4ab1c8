from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import orbit.models  # noqa: F401 (registers SQLModel tables)

from orbit.config import get_settings
from orbit.db import create_db_and_tables
from orbit.routers import health, reflections

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    create_db_and_tables()
    logger.info("Orbit backend started (db=%s)", settings.db_url.split("://", 1)[0])
    yield


app = FastAPI(
    title="Orbit",
    description="Mood, energy and reflection journaling service",
    version="0.1.0",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        f"https://{settings.domain}",
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(reflections.router)
