"""streamcatalog_recommendation_service/models/database.py"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from streamcatalog_recommendation_service.config import get_database_url
from streamcatalog_recommendation_service.models.base import Base

# Get database URL (falls back to a local SQLite file)
DATABASE_URL = get_database_url()

# Create engine
engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    pool_recycle=3600,
    echo=False  # Set to True for SQL debugging
)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db():
    """Create all tables that do not exist yet."""
    # Imported for its side effect of registering the table on Base.metadata
    from streamcatalog_recommendation_service.models.key_value_entry import KeyValueEntry  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
