from __future__ import annotations


class StorageError(Exception):
    """A database statement failed; the message is the driver's description."""


class TodoNotFoundError(StorageError):
    """A by-id statement matched zero rows."""

    def __init__(self, todo_id: int) -> None:
        super().__init__(f"Todo {todo_id} not found")
        self.todo_id = todo_id
