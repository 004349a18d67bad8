"""Environment driven settings for the airline management console."""
from __future__ import annotations

import os
from typing import Tuple

from sqlalchemy.engine import URL


def _parse_band(raw: str, *, name: str) -> Tuple[int, int]:
    low, sep, high = raw.partition("-")
    if not sep:
        raise ValueError(f"{name} must look like 'LOW-HIGH', got {raw!r}")
    band = (int(low), int(high))
    if band[0] > band[1]:
        raise ValueError(f"{name} lower bound exceeds upper bound: {raw!r}")
    return band


VALID_YEARS: Tuple[int, int] = _parse_band(
    os.environ.get("AIRLINE_VALID_YEARS", "2025-2026"), name="AIRLINE_VALID_YEARS"
)
FLIGHT_NUMBERS: Tuple[int, int] = _parse_band(
    os.environ.get("AIRLINE_FLIGHT_NUMBERS", "100-120"), name="AIRLINE_FLIGHT_NUMBERS"
)

MANAGER_SECRET = os.environ.get("AIRLINE_MANAGER_SECRET", "24601")
MAX_ATTEMPTS = int(os.environ.get("AIRLINE_MAX_ATTEMPTS", 5))

DB_HOST = os.environ.get("AIRLINE_DB_HOST", "localhost")
DB_PASSWORD = os.environ.get("AIRLINE_DB_PASSWORD", "")
LOG_LEVEL = os.environ.get("AIRLINE_LOG_LEVEL", "WARNING")


def postgres_url(dbname: str, port: str, user: str, *, host: str = DB_HOST, password: str = DB_PASSWORD) -> str:
    """Build the SQLAlchemy URL for the PostgreSQL backend."""

    return URL.create(
        "postgresql+psycopg2",
        username=user,
        password=password or None,
        host=host,
        port=int(port),
        database=dbname,
    ).render_as_string(hide_password=False)
