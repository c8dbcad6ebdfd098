from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from .errors import StorageError, TodoNotFoundError
from .models import ListQuery, TodoEntity
from .settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    description: str = "description"
    completed: str = "completed"


_COLS = _Cols()
_RETURNING = f"{_COLS.id}, {_COLS.description}, {_COLS.completed}"

_LIST_SQL = text(
    f"""
    SELECT {_RETURNING}
    FROM {_COLS.table}
    ORDER BY {_COLS.id}
    LIMIT :limit OFFSET :offset
    """
)
_INSERT_SQL = text(
    f"""
    INSERT INTO {_COLS.table} ({_COLS.description}, {_COLS.completed})
    VALUES (:description, :completed)
    RETURNING {_RETURNING}
    """
)
_GET_SQL = text(
    f"""
    SELECT {_RETURNING}
    FROM {_COLS.table}
    WHERE {_COLS.id} = :id
    """
)
_UPDATE_SQL = text(
    f"""
    UPDATE {_COLS.table}
    SET {_COLS.description} = :description, {_COLS.completed} = :completed
    WHERE {_COLS.id} = :id
    RETURNING {_RETURNING}
    """
)
_DELETE_SQL = text(
    f"""
    DELETE FROM {_COLS.table}
    WHERE {_COLS.id} = :id
    RETURNING {_RETURNING}
    """
)


# PUBLIC_INTERFACE
def build_engine(settings: Settings) -> AsyncEngine:
    """
    Create the process-wide pooled engine. The pool caps live connections at
    settings.db_pool_size; callers beyond that wait for a connection to be released.
    """
    return create_async_engine(
        settings.database_url,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        echo=settings.db_echo,
    )


def _describe(exc: SQLAlchemyError) -> str:
    # Prefer the driver's own message over SQLAlchemy's wrapper text
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)


class TodoRepository:
    """
    SQL gateway for the todos table.

    Every operation borrows one pooled connection, runs a single parameterized
    statement in its own transaction and gives the connection back.
    """

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    @asynccontextmanager
    async def _conn(self) -> AsyncIterator[AsyncConnection]:
        try:
            async with self._engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            raise StorageError(_describe(e)) from e

    @staticmethod
    def _row_to_entity(row: RowMapping) -> TodoEntity:
        # Both columns are nullable; NULL reads back as the update defaults ("" / False)
        description = row[_COLS.description]
        return {
            "id": int(row[_COLS.id]),
            "description": description if description is not None else "",
            # SQLite hands booleans back as 0/1
            "completed": bool(row[_COLS.completed]),
        }

    async def list(self, query: Optional[ListQuery] = None) -> List[TodoEntity]:
        """
        Return one page of todos ordered by id. No total count is computed;
        limit=0 yields an empty page rather than every row.
        """
        q = query or ListQuery()
        async with self._conn() as conn:
            result = await conn.execute(_LIST_SQL, {"offset": q.offset, "limit": q.limit})
            rows = result.mappings().all()
        return [self._row_to_entity(r) for r in rows]

    async def create(self, description: str) -> TodoEntity:
        async with self._conn() as conn:
            result = await conn.execute(_INSERT_SQL, {"description": description, "completed": False})
            row = result.mappings().one()
        entity = self._row_to_entity(row)
        logger.debug("Inserted todo %s", entity["id"])
        return entity

    async def get(self, todo_id: int) -> TodoEntity:
        async with self._conn() as conn:
            result = await conn.execute(_GET_SQL, {"id": todo_id})
            row = result.mappings().first()
        if row is None:
            raise TodoNotFoundError(todo_id)
        return self._row_to_entity(row)

    async def update(
        self,
        todo_id: int,
        description: Optional[str] = None,
        completed: Optional[bool] = None,
    ) -> TodoEntity:
        """
        Overwrite both columns of a todo.

        Missing values are not merged with the stored row: description falls
        back to "" and completed to False.
        """
        params = {
            "id": todo_id,
            "description": description if description is not None else "",
            "completed": completed if completed is not None else False,
        }
        async with self._conn() as conn:
            result = await conn.execute(_UPDATE_SQL, params)
            row = result.mappings().first()
        if row is None:
            raise TodoNotFoundError(todo_id)
        return self._row_to_entity(row)

    async def delete(self, todo_id: int) -> TodoEntity:
        """Delete a todo and return the values it had just before deletion."""
        async with self._conn() as conn:
            result = await conn.execute(_DELETE_SQL, {"id": todo_id})
            row = result.mappings().first()
        if row is None:
            raise TodoNotFoundError(todo_id)
        logger.debug("Deleted todo %s", todo_id)
        return self._row_to_entity(row)
