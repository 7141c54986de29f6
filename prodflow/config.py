"""Environment-driven settings."""

from __future__ import annotations

import os
from decimal import Decimal

STORE_PATH = os.environ.get("PRODFLOW_STORE", "prodflow.json")
DEFAULT_TAX_RATE = Decimal(os.environ.get("PRODFLOW_TAX_RATE", "10"))
LOG_LEVEL = os.environ.get("PRODFLOW_LOG_LEVEL", "INFO")


def store_path() -> str:
    """Store location, re-read so tests and servers can repoint it."""
    return os.environ.get("PRODFLOW_STORE", STORE_PATH)

DEFAULT_ORIGINS = [
    "http://localhost:8501",
    "http://localhost:3000",
    "http://127.0.0.1:8501",
]


def allowed_origins() -> list[str]:
    """CORS origins from ALLOWED_ORIGINS (comma separated, "*" for any)."""
    raw = os.environ.get("ALLOWED_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    if "*" in origins:
        return ["*"]
    return origins or list(DEFAULT_ORIGINS)
