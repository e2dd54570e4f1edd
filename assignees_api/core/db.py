from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .app_logger import get_logger
from .settings import config_settings

logger = get_logger("db")

DATABASE_URL = config_settings.DATABASE_URL


def enable_sqlite_foreign_keys(target: Engine) -> None:
    """SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection."""
    if target.dialect.name != "sqlite":
        return

    @event.listens_for(target, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# 1. SQLAlchemy Engine
# The engine manages the connection pool and dialect.
engine = create_engine(
    DATABASE_URL,
    # Only needed for SQLite to handle concurrent requests
    connect_args={"check_same_thread": False} if "sqlite" in DATABASE_URL else {},
)
enable_sqlite_foreign_keys(engine)

# 2. SessionLocal
# Each request gets its own session (a unit of work).
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependency that yields a database session for a single request,
    and ensures the session is closed afterward.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        # Ensures the session is closed even if an exception occurs
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Runs the enclosed block as one unit of work on ``db``.

    Commits when the block finishes, rolls back and re-raises on any error.
    Every row mutation made inside the block lands in the same commit.
    """
    try:
        yield db
        db.commit()
    except Exception:
        logger.debug("Rolling back transaction")
        db.rollback()
        raise
