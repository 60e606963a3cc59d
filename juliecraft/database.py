# juliecraft/database.py

import logging

from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

from juliecraft.core.config import DATABASE_URL
from juliecraft.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

# ***************************************************************
# 1. Engine and session factory
# ***************************************************************
# Without DATABASE_URL the app still starts; every handler that needs the
# database answers 503 instead.
engine = None
SessionLocal = None

if DATABASE_URL:
    engine = create_engine(DATABASE_URL, pool_pre_ping=True)
    # Class used to open one session per request
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
else:
    logger.warning("DATABASE_URL is not set; database-backed endpoints will return 503")

# ***************************************************************
# 2. Declarative base shared by every model
# ***************************************************************
Base = declarative_base()


def is_configured() -> bool:
    return SessionLocal is not None


# Dependency (Dependency Injection) that provides a DB session
def get_db():
    """Provides a database session to a FastAPI endpoint."""
    if SessionLocal is None:
        raise ConfigurationError()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """Creates every table known to the models if it does not exist yet."""
    if engine is None:
        return
    # Importing the models registers them on Base.metadata
    import juliecraft.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def ping() -> bool:
    """Runs SELECT 1 against the configured database."""
    if engine is None:
        return False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        logger.exception("Database ping failed")
        return False
