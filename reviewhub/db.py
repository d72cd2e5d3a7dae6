import logging

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, declarative_base

from .config import settings
from .errors import InternalError

logger = logging.getLogger(__name__)

DATABASE_URL = settings.database_url


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores ON DELETE CASCADE unless the pragma is set per connection."""
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# For SQLite, enable check_same_thread=False for multithreading in FastAPI
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True, future=True)

if DATABASE_URL.startswith("sqlite"):
    enable_sqlite_foreign_keys(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)

# Each service owns its own schema; table names do not overlap so both can share a store.
Base = declarative_base()
CommentsBase = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    except SQLAlchemyError:
        db.rollback()
        raise
    finally:
        db.close()


def dispose_engine() -> None:
    logger.info("Disposing database connection pool")
    engine.dispose()


def database_time(db):
    """Round-trip to the store; used as the connectivity check."""
    try:
        return db.execute(text("SELECT CURRENT_TIMESTAMP")).scalar_one()
    except SQLAlchemyError as e:
        raise InternalError("database connection error") from e
