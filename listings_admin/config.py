# listings_admin/config.py
"""Environment-driven settings.

Values are read once at import time after loading a local `.env` file.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _normalize_url(url):
    # SQLAlchemy 2.x doesn't accept 'postgres://'
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql+psycopg2://", 1)
    return url


DATABASE_URL = _normalize_url(os.getenv("POSTGRES_URL"))
DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 5))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", 10))
DB_STATEMENT_TIMEOUT_MS = int(os.getenv("DB_STATEMENT_TIMEOUT_MS", 15000))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# per-invocation budget for the listing update pipeline
UPDATE_DEADLINE_SECONDS = float(os.getenv("UPDATE_DEADLINE_SECONDS", 30))
UPDATE_ATOMIC = os.getenv("UPDATE_ATOMIC", "0") == "1"
