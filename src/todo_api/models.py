from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A Todo row as read back from the ``todos`` table.

    Fields:
    - id: Database-assigned integer identifier
    - description: Free-form text (may be empty)
    - completed: Boolean completion flag
    """

    id: int
    description: str
    completed: bool


@dataclass(frozen=True)
class ListQuery:
    """
    Offset/limit window for listing todos, passed straight through to SQL.
    """
    offset: int = 0
    limit: int = 0
