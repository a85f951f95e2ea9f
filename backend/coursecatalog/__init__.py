"""
Course Catalog Backend — Application Package Initializer
=========================================================

What: Marks the `coursecatalog` directory as a Python package.
Why:  Enables module imports like `from coursecatalog.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is a thin, read-only layer over the course catalog database:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Query Building)      │  ← Filters, ordering, post-processing
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Nothing here writes to the database. The `courses` and `syllabi_links`
    tables are owned and populated elsewhere.
"""

__version__ = "1.0.0"
