"""
TaskTrack Backend - Application Package
=======================================

What: Task-management HTTP backend (accounts + per-user tasks).
Who:  Imported by uvicorn (`tasktrack.main:app`), Alembic and pytest.

Layering:

    ┌─────────────────────────────────────┐
    │   Routes (FastAPI routers)          │  HTTP concerns, request schemas
    ├─────────────────────────────────────┤
    │   Services (account / task rules)   │  validation, existence checks
    ├─────────────────────────────────────┤
    │   PersistenceGateway                │  CRUD over users and tasks
    ├─────────────────────────────────────┤
    │   Database (engine + sessions)      │  built once per process
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
