# product_service/db.py

from typing import Any, Dict

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from .config import settings

DATABASE_URL = settings.DATABASE_URL


def _engine_options(url: str) -> Dict[str, Any]:
    if url.startswith("sqlite"):
        options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        # In-memory databases live and die with their single connection
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        return options

    connect_args: Dict[str, Any] = {}
    if settings.DB_STATEMENT_TIMEOUT_MS:
        connect_args["options"] = f"-c statement_timeout={int(settings.DB_STATEMENT_TIMEOUT_MS)}"

    return {
        "pool_pre_ping": True,
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": 0,
        # Age-based, not idle-based: connections older than this are replaced
        # on their next checkout, busy or not. Idle ones linger until then.
        "pool_recycle": settings.DB_POOL_IDLE_TIMEOUT,
        "pool_timeout": settings.DB_POOL_TIMEOUT,
        "connect_args": connect_args,
    }


engine = create_engine(DATABASE_URL, **_engine_options(DATABASE_URL))

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

class Base(DeclarativeBase):
    pass

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
