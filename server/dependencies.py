"""FastAPI Dependencies

Centralized dependency injection for reuse across all route modules.
"""

from fastapi import Request

from database.db_postgres import Database
from server.reference import ReferenceData


def get_db(request: Request) -> Database:
    """Dependency to get shared database instance from app state

    Usage in routes:
        @router.get("/endpoint")
        async def endpoint(db: Database = Depends(get_db)):
            candidate = await db.candidates.get_candidate(7)

    Tests swap app.state.db for an in-memory fake.
    """
    return request.app.state.db


def get_reference(request: Request) -> ReferenceData:
    """Dependency to get the immutable reference tables built at startup"""
    return request.app.state.reference
