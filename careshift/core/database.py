"""
Database configuration and session management
"""

from typing import Generator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine
import structlog

from careshift.core.config import Settings

logger = structlog.get_logger(__name__)


def create_db_engine(settings: Settings) -> Engine:
    """Create the engine once at process start"""
    url = settings.DATABASE_URL
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url:
            # One shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=False, **kwargs)

    return create_engine(url, echo=settings.DEBUG, pool_pre_ping=True)


def init_db(engine: Engine) -> None:
    """Initialize database tables"""
    # Register table metadata before create_all
    import careshift.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created")


def get_session(request: Request) -> Generator[Session, None, None]:
    """Dependency to get database session bound to the application engine"""
    with Session(request.app.state.engine) as session:
        yield session
