"""
Registros API - Application Package Initializer
================================================

What: Marks the `registros` directory as a Python package.
Who:  Imported by uvicorn (`registros.main:app`), pytest, and the console script.

Architecture Note:
    The backend is a thin translation layer between HTTP verbs and SQL statements:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← request shape, status codes
    ├─────────────────────────────────────┤
    │     RecordStore (Storage Adapter)   │  ← one statement per operation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← async engine over a SQLite file
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
