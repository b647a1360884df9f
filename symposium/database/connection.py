"""
Database Connection Management.

SQLAlchemy engine and session lifecycle for the symposium store. SQLite is
the default backend; any SQLAlchemy URL (PostgreSQL, MySQL) works.
"""
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.exc import SQLAlchemyError

from symposium.core.config import get_settings
from symposium.core.logging_config import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseConnection:
    """
    Manages database connections and session lifecycle.

    Example:
        >>> db = DatabaseConnection("sqlite:///symposium.db")
        >>> with db.get_session() as session:
        ...     session.execute(text("SELECT 1"))
    """

    def __init__(self, connection_url: Optional[str] = None):
        """
        Initialize database engine.

        Args:
            connection_url: Optional connection URL. If not provided, uses settings.
        """
        db_url = connection_url or get_settings().database_url
        self.url = db_url

        if db_url.startswith("sqlite"):
            # Sessions are opened from FastAPI's worker threads
            self.engine = create_engine(
                db_url,
                connect_args={"check_same_thread": False},
                echo=False,
            )
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        else:
            # pool_pre_ping: Test connections before using (handles stale connections)
            self.engine = create_engine(
                db_url,
                pool_pre_ping=True,
                pool_size=5,
                max_overflow=10,
                echo=False,
            )

        self._session_factory = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

        logger.info(f"Database connection initialized: {db_url.split('@')[-1]}")

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Get a database session with automatic cleanup.

        Transactions are rolled back on error, committed on success.
        Objects stay readable after the session closes.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database error, rolling back: {e}")
            raise
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def check_connection(self) -> bool:
        """
        Test database connectivity.

        Returns:
            True if connection is healthy, False otherwise.
        """
        try:
            with self.get_session() as session:
                session.execute(text("SELECT 1"))
            logger.debug("Database connection check: OK")
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database connection check failed: {e}")
            return False

    def close(self):
        """Close all connections in the pool."""
        self.engine.dispose()
        logger.info("Database connections closed")


# Module-level instance (singleton pattern)
_db_connection: Optional[DatabaseConnection] = None


def get_database() -> DatabaseConnection:
    """
    Get or create the database connection instance.

    Lazy initialization keeps imports free of connection side effects.
    """
    global _db_connection
    if _db_connection is None:
        _db_connection = DatabaseConnection()
    return _db_connection
