from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from didanchor.logging import get_logger

logger = get_logger(__name__)

Base = declarative_base()


def create_db_engine(database_url: str) -> Engine:
    """Creates the SQLAlchemy engine for `database_url`.

    SQLite connections are shared across threads; an in-memory SQLite database is kept
    on a single connection so every session sees the same tables.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(engine: Engine):
    """Creates all database tables defined by models inheriting from Base."""
    # Register the table models on Base.metadata
    from didanchor.store import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database tables created (if they didn't exist) at {engine.url.render_as_string(hide_password=True)}")
