"""
Database configuration and connection management
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from quickbite.core.config import settings

def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    kwargs = {"connect_args": {"check_same_thread": False}}
    # In-memory SQLite must share one connection across sessions
    if url in ("sqlite://", "sqlite:///:memory:"):
        kwargs["poolclass"] = StaticPool
    return kwargs

# SQLAlchemy setup
engine = create_engine(
    settings.DATABASE_URL,
    echo=False,  # Set to True for SQL query logging
    **_engine_kwargs(settings.DATABASE_URL)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

def generate_id() -> str:
    return uuid.uuid4().hex

def get_db() -> Session:
    """Get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables():
    """Create all database tables"""
    # Import models so they register with the metadata
    from quickbite.models import user, food, order  # noqa: F401
    Base.metadata.create_all(bind=engine)

def drop_tables():
    """Drop all database tables (for testing/reset)"""
    from quickbite.models import user, food, order  # noqa: F401
    Base.metadata.drop_all(bind=engine)
