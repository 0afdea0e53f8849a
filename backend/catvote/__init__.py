"""
CatVote: Application Package Initializer
========================================

What: Marks the `catvote` directory as a Python package.
Who:  Used by uvicorn (`catvote.main:app`), pytest, and the client data layer.

Architecture Note:
    The backend follows a layered layout, and the client sits on top of the
    HTTP surface it exposes:

    ┌─────────────────────────────────────┐
    │   Client (provider + screens)       │  ← catvote.client, talks HTTP only
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← aggregation, seeding, winners
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │          Store (Persistence)        │  ← one SQLite file, async sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
