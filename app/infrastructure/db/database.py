"""
Database configuration and session management.
"""

from typing import Generator
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import NullPool

from app.config import settings


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections may be shared across worker threads."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False, "timeout": 30}

    return create_engine(
        database_url,
        poolclass=NullPool,
        echo=echo,
        connect_args=connect_args,
    )


# Create SQLAlchemy engine
engine = build_engine(settings.database_url, echo=settings.debug)

# Create SessionLocal class
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

# Create declarative base
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """
    Dependency function to get database session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine = engine) -> None:
    """Create any missing tables."""
    # Import models so they are registered on Base.metadata
    from app.infrastructure.db import models  # noqa: F401

    Base.metadata.create_all(bind=bind)


def drop_db(bind: Engine = engine) -> None:
    from app.infrastructure.db import models  # noqa: F401

    Base.metadata.drop_all(bind=bind)
