"""
Inkpost — Blogging Platform Package
====================================

What: Root package for the Inkpost REST backend and its Python client.
Who:  Imported by uvicorn (inkpost.main:app), Alembic, pytest, and client code.

Architecture Note:
    The backend follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, guards, DTOs
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Ownership, slugs, uniqueness
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    inkpost.client sits on the other side of the wire: an httpx transport,
    per-entity service wrappers, and state stores.
"""

__version__ = "1.0.0"
