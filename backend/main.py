"""
main.py
───────
Random Trip — cluster-fair domestic destination picker.
FastAPI application entry point.
"""

import logging
import random
from contextlib import asynccontextmanager

from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorClient

from api.destinations import router as destinations_router
from core.config import get_settings
from core.database import initialize_db
from core.security import setup_security
from repositories.destinations import build_repository

# ── Settings ────────────────────────────────────────────────────────────────
settings = get_settings()

# ── Logging ─────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger("randomtrip")


# ── Lifespan (startup / shutdown) ──────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage the MongoDB connection pool across the app lifetime."""
    logger.info("Connecting to MongoDB …")
    app.state.mongo_client = AsyncIOMotorClient(settings.MONGODB_URL)
    app.state.db = app.state.mongo_client[settings.MONGODB_DATABASE]
    logger.info("MongoDB connected ✓ (layout: %s)", settings.STORE_LAYOUT)

    # Ensure required indexes exist (idempotent)
    await initialize_db(app.state.db, settings)
    logger.info("Database initialization complete ✓")

    app.state.repository = build_repository(app.state.db, settings)
    app.state.rng = random.Random(settings.RANDOM_SEED)

    yield  # ← application runs here

    logger.info("Shutting down MongoDB connection …")
    app.state.mongo_client.close()
    logger.info("MongoDB disconnected ✓")


# ── App factory ─────────────────────────────────────────────────────────────
app = FastAPI(
    title="Random Trip",
    version="1.0.0",
    description="Random domestic destination picker — API",
    lifespan=lifespan,
)

# Wire security middleware (rate limiter, headers, CORS, exception handler)
setup_security(app)

# ── Routers ─────────────────────────────────────────────────────────────────
app.include_router(destinations_router, prefix="/api")


# ── Health check ────────────────────────────────────────────────────────────
@app.get("/health", tags=["ops"])
async def health_check():
    """Lightweight liveness probe."""
    return {"status": "healthy"}
