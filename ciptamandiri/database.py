# ciptamandiri/database.py
import logging
import urllib.parse
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

from .config import DATABASE_URL, DB_ECHO

logger = logging.getLogger(__name__)


def _engine_kwargs(url: str) -> dict:
    kwargs = {"echo": DB_ECHO, "future": True}
    if url.startswith("sqlite"):
        # aiosqlite connections are bound to the loop that opened them
        kwargs["poolclass"] = NullPool
    return kwargs


engine = create_async_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))

async_session_maker = sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

Base = declarative_base()


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


def ensure_database_exists(url: str = DATABASE_URL) -> bool:
    """
    Create the PostgreSQL database named in ``url`` if it is missing.

    Connects to the maintenance database (``postgres``) with psycopg2.
    Returns True when the database exists afterwards; non-PostgreSQL URLs
    are left alone and report False.
    """
    if not url.startswith("postgresql"):
        return False

    import psycopg2
    import psycopg2.extensions

    parsed = urllib.parse.urlparse(url)
    dbname = parsed.path.lstrip("/") if parsed.path else ""
    if not dbname:
        return False

    conn = psycopg2.connect(
        dbname="postgres",
        user=parsed.username or "postgres",
        password=parsed.password or "",
        host=parsed.hostname or "localhost",
        port=parsed.port or 5432,
    )
    try:
        conn.autocommit = True
        with conn.cursor() as cur:
            cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (dbname,))
            if cur.fetchone() is None:
                cur.execute("CREATE DATABASE %s", (psycopg2.extensions.AsIs(dbname),))
                logger.info("Created database %s", dbname)
    finally:
        conn.close()
    return True
