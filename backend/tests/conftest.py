"""
Course Catalog Backend — Test Configuration (conftest.py)
==========================================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Tests run without a database: sessions are mocks, and the app's
       get_db_session dependency is overridden to hand those mocks out.

Fixtures:
    ├── mock_db_session: AsyncMock standing in for AsyncSession
    ├── make_result / make_course / make_syllabus_row: fake query results
    └── test_client: HTTPX AsyncClient wired to the app with the mock session
"""

import os

# Must be set before coursecatalog.config is imported anywhere
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("RATE_LIMIT_REQUESTS", "100000")

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport


# ══════════════════════════════════════════════════════════════════════════
# Fake rows and results
# ══════════════════════════════════════════════════════════════════════════

def make_syllabus_row(row_num, semester, professor, link=None):
    """A row as returned by the syllabus SELECT (attribute access like sqlalchemy.Row)."""
    return SimpleNamespace(
        row_num=row_num,
        semester=semester,
        professor=professor,
        syllabus_link=link or f"https://example.edu/syllabi/{row_num}.pdf",
    )


def make_course(course_number, department, title="Untitled", description="", sbcs=None):
    """An object shaped like a Course ORM instance."""
    return SimpleNamespace(
        course_number=course_number,
        department=department,
        title=title,
        description=description,
        sbcs=list(sbcs or []),
    )


def make_result(rows=None, scalars=None):
    """
    A fake sqlalchemy Result.

    rows:    returned by result.all()
    scalars: returned by result.scalars().all()
    """
    result = MagicMock()
    result.all.return_value = list(rows or [])
    result.scalars.return_value.all.return_value = list(scalars or [])
    return result


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value = make_result(rows=[...])
        result = await syllabus_service.get_syllabi(mock_db_session, "CSE 214")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session


@pytest.fixture
def sample_courses():
    """A small catalog in Course_Number order."""
    return [
        make_course("AMS 110", "AMS", "Probability and Statistics", "Intro to probability", ["QPS"]),
        make_course("CSE 114", "CSE", "Introduction to Object-Oriented Programming",
                    "Java programming", ["TECH", "STEM+"]),
        make_course("CSE 214", "CSE", "Data Structures", "Lists, trees and graphs", ["STEM+"]),
        make_course("WRT 102", "WRT", "Intermediate Writing Workshop", "Writing", ["WRT"]),
    ]


# ══════════════════════════════════════════════════════════════════════════
# HTTP client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(mock_db_session):
    """
    HTTPX AsyncClient routed straight into the ASGI app.

    get_db_session is overridden so every request receives mock_db_session.
    """
    from coursecatalog.database import get_db_session
    from coursecatalog.main import app

    async def override_get_db_session():
        yield mock_db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
