"""Database base configuration."""
import os
import ssl
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy import JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.settings import settings

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests and local dev).
JSONType = JSON().with_variant(JSONB(), "postgresql")


def normalize_async_url(url: str) -> str:
    """Ensure URL uses an async driver; hosting providers often hand out postgres:// or postgresql://."""
    u = (url or "").strip()
    if u.startswith("postgres://"):
        return u.replace("postgres://", "postgresql+asyncpg://", 1)
    if u.startswith("postgresql://"):
        return u.replace("postgresql://", "postgresql+asyncpg://", 1)
    if u.startswith("sqlite://") and not u.startswith("sqlite+aiosqlite://"):
        return u.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return u


def async_pg_connect_args(url: str) -> dict:
    """asyncpg does not accept sslmode; translate sslmode=require into an ssl connect arg.

    Set DATABASE_SSL_VERIFY=true to keep strict certificate verification.
    """
    qs = parse_qs(urlparse(url).query, keep_blank_values=True)
    if qs.get("sslmode") != ["require"]:
        return {}
    if os.environ.get("DATABASE_SSL_VERIFY", "false").strip().lower() in ("true", "1"):
        return {"ssl": True}
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return {"ssl": ctx}


def url_without_sslmode(url: str) -> str:
    parsed = urlparse(url)
    qs = parse_qs(parsed.query, keep_blank_values=True)
    qs.pop("sslmode", None)
    return urlunparse(parsed._replace(query=urlencode(qs, doseq=True)))


_db_url = normalize_async_url(settings.database_url)
engine = create_async_engine(
    url_without_sslmode(_db_url),
    connect_args=async_pg_connect_args(_db_url),
    echo=settings.database_echo,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# Note: models are imported in app/main.py (and alembic/env.py) to register them on Base.metadata.
