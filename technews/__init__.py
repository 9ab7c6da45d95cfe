"""
Tech News Backend — Application Package Initializer
===================================================

What: Marks the `technews` directory as a Python package.
Who:  Imported by uvicorn (`technews.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is split into layers, each importing only from the layers below:

    ┌─────────────────────────────────────┐
    │        Routes (API Layer)           │  ← HTTP concerns: status codes, cookies
    ├─────────────────────────────────────┤
    │     Services (Business Logic)       │  ← find / create / update / destroy
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← SQLAlchemy ORM + Pydantic contracts
    ├─────────────────────────────────────┤
    │     Database (Persistence)          │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
