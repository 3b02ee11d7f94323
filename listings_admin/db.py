# listings_admin/db.py
"""Database engine and session utilities.

Centralized SQLAlchemy engine creation, the session dependency helper for
FastAPI, and a dialect-aware `insert` used for ON CONFLICT upserts.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from . import config

if not config.DATABASE_URL:
    raise RuntimeError("POSTGRES_URL not set")


def make_engine(url):
    if url.startswith("sqlite"):
        # single shared connection so an in-memory database survives across sessions
        eng = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

        @event.listens_for(eng, "connect")
        def _enable_foreign_keys(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return eng
    # tuned pool settings for cloud DB
    return create_engine(
        url,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        connect_args={"options": f"-c statement_timeout={config.DB_STATEMENT_TIMEOUT_MS}"},
    )


engine = make_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def insert(db, table):
    """Return an INSERT construct supporting `on_conflict_do_update` for the session's dialect."""
    if db.get_bind().dialect.name == "sqlite":
        return sqlite.insert(table)
    return postgresql.insert(table)
