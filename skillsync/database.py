# skillsync/database.py - Database Configuration
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from skillsync.config import settings

logger = logging.getLogger(__name__)

# Database URL loaded from .env via skillsync/config.py
DATABASE_URL = settings.DATABASE_URL


def _create_engine(url: str):
    if str(url).startswith("sqlite"):
        if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
            # One shared connection, otherwise every checkout sees an empty DB.
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(url, connect_args={"check_same_thread": False})
    return create_engine(url, pool_pre_ping=True)


engine = _create_engine(DATABASE_URL)

# Session maker
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def check_database_connection() -> None:
    """Fail fast when the store is unreachable."""
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    logger.info("Database connection verified (%s)", engine.url.get_backend_name())


# Dependency to get database session
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
