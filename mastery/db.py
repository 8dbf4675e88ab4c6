from __future__ import annotations

import logging
from urllib.parse import urlparse, urlunparse, parse_qsl, urlencode

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from mastery.settings import get_settings

logger = logging.getLogger(__name__)


def normalize_database_url(database_url: str) -> str:
    url = str(database_url or "").strip()
    if not url:
        return url
    if url.startswith("postgres://"):
        url = "postgresql+psycopg2://" + url[len("postgres://") :]
    elif url.startswith("postgresql://"):
        url = "postgresql+psycopg2://" + url[len("postgresql://") :]
    try:
        parsed = urlparse(url)
        if "channel_binding=" in (parsed.query or ""):
            query_items = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != "channel_binding"]
            parsed = parsed._replace(query=urlencode(query_items))
            url = urlunparse(parsed)
    except ValueError:
        return url
    return url


def using_local_sqlite(database_url: str) -> bool:
    return str(database_url).strip().lower().startswith("sqlite")


def describe_database_target(database_url: str) -> str:
    url = str(database_url or "").strip()
    if using_local_sqlite(url):
        return f"{url} (local file)"
    if not url:
        return "(empty)"
    parsed = urlparse(url)
    host = parsed.hostname or "unknown-host"
    port = f":{parsed.port}" if parsed.port else ""
    db_name = parsed.path.lstrip("/") or "database"
    return f"{parsed.scheme}://{host}{port}/{db_name}"


def build_engine(database_url: str) -> Engine:
    url = normalize_database_url(database_url)
    if using_local_sqlite(url):
        return create_engine(url, connect_args={"check_same_thread": False}, future=True)
    return create_engine(url, pool_pre_ping=True, future=True)


_engine: Engine | None = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        database_url = get_settings().database_url
        logger.info("Opening store at %s", describe_database_target(database_url))
        _engine = build_engine(database_url)
    return _engine
