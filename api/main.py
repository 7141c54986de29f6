"""FastAPI application for the ProdFlow Billing API."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from prodflow import config
from prodflow.logging_config import configure_logging

API_NAME = "ProdFlow Billing API"
API_VERSION = "1.0.0"

configure_logging(config.LOG_LEVEL)

app = FastAPI(
    title=API_NAME,
    description="Shoot ledgers, invoices and purchase orders for a production studio.",
    version=API_VERSION,
)

origins = config.allowed_origins()
wildcard = origins == ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    # Browsers reject credentials with a wildcard origin
    allow_credentials=not wildcard,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)

app.include_router(router)


@app.get("/")
async def root():
    return {
        "name": API_NAME,
        "version": API_VERSION,
        "docs": "/docs",
        "health": f"{router.prefix}/health",
    }
