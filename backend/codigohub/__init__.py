"""
CodigoHub Backend — Application Package Initializer
===================================================

What: Marks the `codigohub` directory as a Python package.
Who:  Used by uvicorn (`codigohub.main:app`), Alembic and pytest.

Architecture Note:
    The backend is a layered CRUD service:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Rules & Relationships)  │  ← existence → authorization → action
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Services never see HTTP objects; they receive an AsyncSession and the
    authenticated Actor and raise CodigoHubError subclasses that the global
    handlers in main.py turn into status codes.
"""

__version__ = "1.0.0"
