from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

from reboot.config import DB_URL

Base = declarative_base()


def make_engine(url: str = DB_URL) -> Engine:
    """Create an engine; SQLite connections may be shared with the scheduler's threads."""
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, connect_args=connect_args, future=True)


def make_session_factory(bind: Engine) -> sessionmaker:
    # Entries are read after the session closes, so keep loaded state.
    return sessionmaker(bind=bind, autoflush=False, expire_on_commit=False, future=True)


engine = make_engine()
SessionLocal = make_session_factory(engine)
