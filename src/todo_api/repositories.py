from __future__ import annotations

from fastapi import Request

from .db import TodoRepository


# PUBLIC_INTERFACE
def get_repository(request: Request) -> TodoRepository:
    """
    FastAPI dependency returning the repository built at startup.

    The repository (and the connection pool behind it) lives on app.state for
    the lifetime of the process.
    """
    return request.app.state.repository
