"""
Pytest configuration and shared fixtures.
"""

import pytest
from datetime import date, datetime, timedelta
from typing import List

from fastapi.testclient import TestClient

from jobboard.api import create_app
from jobboard.config import Settings
from jobboard.database import JobPosting, JobStore, init_database
from jobboard.logger import StructuredLogger


@pytest.fixture
def store(tmp_path) -> JobStore:
    """Empty store backed by a temporary SQLite file."""
    job_store = JobStore(f"sqlite:///{tmp_path / 'test.db'}")
    init_database(job_store)
    yield job_store
    job_store.dispose()


@pytest.fixture
def three_postings() -> List[JobPosting]:
    """Ministries A, A, B; one urgent, one new, no overlap."""
    now = datetime(2026, 10, 1, 12, 0, 0)
    return [
        JobPosting(
            title="Policy Analyst",
            ministry="Ministry of Finance",
            job_type="Permanent",
            application_period_end=date(2026, 11, 15),
            is_urgent=True,
            is_new=False,
            created_at=now - timedelta(days=2),
        ),
        JobPosting(
            title="Senior Accountant",
            ministry="Ministry of Finance",
            job_type="Contract",
            application_period_end=date(2026, 10, 20),
            is_urgent=False,
            is_new=True,
            created_at=now,
        ),
        JobPosting(
            title="Data Engineer",
            ministry="Ministry of Health",
            job_type="Permanent",
            application_period_end=date(2026, 12, 1),
            is_urgent=False,
            is_new=False,
            created_at=now - timedelta(days=1),
        ),
    ]


@pytest.fixture
def seeded_store(store, three_postings) -> JobStore:
    with store.session() as session:
        session.add_all(three_postings)
        session.commit()
    return store


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite:///{tmp_path / 'test.db'}")


@pytest.fixture
def api_logger() -> StructuredLogger:
    return StructuredLogger(name="jobboard-test", enable_console=False, enable_file=False)


@pytest.fixture
def client(settings, seeded_store, api_logger) -> TestClient:
    app = create_app(settings, store=seeded_store, logger=api_logger)
    return TestClient(app)


@pytest.fixture
def empty_client(settings, store, api_logger) -> TestClient:
    app = create_app(settings, store=store, logger=api_logger)
    return TestClient(app)


@pytest.fixture
def make_postings():
    """Factory for `count` postings with distinct deadlines and creation times."""

    def _make(count: int, ministry: str = "Ministry of Transport") -> List[JobPosting]:
        base = datetime(2026, 1, 1)
        return [
            JobPosting(
                title=f"Officer {i}",
                ministry=ministry,
                job_type="Permanent",
                application_period_end=date(2026, 1, 1) + timedelta(days=(i * 7) % count),
                created_at=base + timedelta(hours=i),
            )
            for i in range(count)
        ]

    return _make
