"""Engine and session factory."""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from backend.invoicing.core.settings import Settings, get_settings


def build_engine(settings: Settings) -> Engine:
    """Create an engine whose connection waits are bounded by the storage timeout."""
    if settings.database_url.startswith("sqlite"):
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False, "timeout": settings.storage_timeout_seconds},
        )
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_timeout=settings.storage_timeout_seconds,
    )


engine = build_engine(get_settings())
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
