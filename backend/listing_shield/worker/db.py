"""
Synchronous Database Access for Celery Workers
Maintenance tasks run outside the event loop and use psycopg2
"""

from contextlib import contextmanager
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from listing_shield.core.config import settings

SYNC_DRIVER_PREFIX = "postgresql+psycopg2://"


def build_sync_database_url(url: str) -> str:
    """
    DATABASE_URL pinned to the psycopg2 driver, with sslmode=require
    unless the URL already sets one (Supabase only accepts SSL).
    """
    parsed = urlparse(url)
    query_params = parse_qs(parsed.query)
    query_params.setdefault("sslmode", ["require"])
    url = urlunparse(parsed._replace(query=urlencode(query_params, doseq=True)))

    for prefix in ("postgresql+asyncpg://", "postgresql://", "postgres://"):
        if url.startswith(prefix):
            return SYNC_DRIVER_PREFIX + url[len(prefix):]
    return url


sync_engine = create_engine(
    build_sync_database_url(settings.DATABASE_URL),
    pool_size=2,
    max_overflow=3,
    pool_pre_ping=True,
    # 30 second statement timeout
    connect_args={"options": "-c statement_timeout=30000"},
)

SyncSessionLocal = sessionmaker(bind=sync_engine, autoflush=False)


@contextmanager
def get_sync_db() -> Session:
    db = SyncSessionLocal()
    try:
        yield db
    finally:
        db.close()
