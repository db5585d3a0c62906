"""
Database schema and connection management.

The job_postings table is owned by the upstream ingestion system; this
service only reads it. Uses SQLAlchemy with PostgreSQL in production and
SQLite in tests.
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Generator, Optional

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


class JobPosting(Base):
    """Job posting model."""

    __tablename__ = "job_postings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    ministry = Column(String, nullable=False)  # issuing organization
    job_type = Column(String, nullable=True)
    location = Column(String, nullable=True)
    url = Column(String, nullable=True)
    application_period_start = Column(Date, nullable=True)
    application_period_end = Column(Date, nullable=True)
    is_urgent = Column(Boolean, nullable=False, default=False)
    is_new = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)


class JobStore:
    """
    Owns the engine and session factory for one database.

    Constructed once per application and passed to whoever needs it;
    call dispose() when the application shuts down.
    """

    def __init__(self, database_url: str, engine: Optional[Engine] = None):
        """
        Args:
            database_url: SQLAlchemy database URL
            engine: Pre-built engine (overrides database_url)
        """
        self.database_url = database_url
        self.engine = engine or create_engine(database_url, pool_pre_ping=True)
        self._session_factory = sessionmaker(bind=self.engine, autoflush=False)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Yield a session that is always closed afterwards."""
        session = self._session_factory()
        try:
            yield session
        finally:
            session.close()

    def dispose(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()


def init_database(store: JobStore) -> None:
    """
    Create tables that do not exist yet.

    Only used for local development and tests; the production table is
    provisioned outside this service.

    Args:
        store: Store whose engine receives the tables
    """
    Base.metadata.create_all(store.engine)
