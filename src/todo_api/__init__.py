"""
Todo API package.

An HTTP CRUD service for todo items backed by a single relational table.
The ASGI application lives at ``todo_api.main:app``.
"""

__version__ = "0.1.0"
