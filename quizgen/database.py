"""
Database engine, session factory and declarative base
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import logging

from quizgen.config import settings

logger = logging.getLogger(__name__)


def _engine_options(url: str) -> dict:
    """SQLite needs cross-thread access; in-memory databases need a single shared connection"""
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}

    options = {"connect_args": {"check_same_thread": False}}
    if ":memory:" in url or url in ("sqlite://", "sqlite:///"):
        options["poolclass"] = StaticPool
    return options


engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    """FastAPI dependency yielding one session per request"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Create all tables"""
    # Register models on Base.metadata
    import quizgen.models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Tables ensured on {engine.url.render_as_string(hide_password=True)}")
