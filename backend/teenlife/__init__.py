"""
TeenLife Hours Backend — Application Package Initializer
=========================================================

What: Marks the `teenlife` directory as a Python package.
Who:  Imported by uvicorn (`teenlife.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is layered:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← verification workflow,
    │                                     │    recognition, notifications
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Authentication sits beside the routes (a FastAPI dependency) and only
    resolves the caller's user id; it never reaches into the services.
"""

__version__ = "1.0.0"
