"""
Checkout Gateway - Application Entry Point
============================================
FastAPI app initialization, logging and router registration.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from config import settings
from modules.payment.routes import router as payment_router, get_checkout_service

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("checkout")


@asynccontextmanager
async def lifespan(app):
    # Build the gateway registry once, before the first request
    service = get_checkout_service()
    logger.info(f"Checkout ready (methods: {', '.join(service.registry.names())})")
    yield


# ==========================================
# Create App
# ==========================================
app = FastAPI(
    title="Checkout Gateway",
    description="Unified checkout over card, wallet and signed redirect gateways",
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url=None,
    lifespan=lifespan,
)

app.include_router(payment_router)


@app.get("/health")
async def health():
    return {"ok": True}
