# infra/db/base.py
from __future__ import annotations
import logging
import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from infra.path import default_db_path

logger = logging.getLogger(__name__)

Base = declarative_base()

SessionLocal = sessionmaker(autoflush=False, autocommit=False)


def database_url() -> str:
    """``PM_DB_URL`` when set, otherwise the SQLite file in the user data dir."""
    url = os.getenv("PM_DB_URL", "").strip()
    if url:
        return url
    return f"sqlite:///{default_db_path().as_posix()}"


def make_engine(url: str | None = None) -> Engine:
    url = url or database_url()
    logger.info("Using database at: %s", url)
    return create_engine(url, echo=False, future=True)


def open_session(url: str | None = None) -> Session:
    SessionLocal.configure(bind=make_engine(url))
    return SessionLocal()
