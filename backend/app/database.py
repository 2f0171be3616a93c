"""Database connection and session management."""
import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from app.config import settings

logger = logging.getLogger(__name__)

if settings.database_url.startswith("sqlite"):
    # Sessions are shared between the event loop and worker threads
    _engine_options = {"connect_args": {"check_same_thread": False}}
else:
    _engine_options = {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
    }

engine = create_engine(settings.database_url, **_engine_options)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db():
    """Create the releases and artists tables if they do not exist yet."""
    from app import models  # noqa: F401  registers the tables on Base

    Base.metadata.create_all(bind=engine)
    logger.debug(f"Database ready at {engine.url.render_as_string(hide_password=True)}")


def get_db():
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
