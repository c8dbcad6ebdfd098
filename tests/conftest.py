import sqlite3
from contextlib import closing

import pytest
from fastapi.testclient import TestClient

from todo_api.main import app

# SQLite stand-in for: todos(id serial primary key, description text, completed boolean)
TODOS_DDL = """
CREATE TABLE todos (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    description TEXT,
    completed BOOLEAN
)
"""


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "todos.db"
    with closing(sqlite3.connect(path)) as conn:
        conn.execute(TODOS_DDL)
        conn.commit()
    return path


@pytest.fixture
def db_url(db_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{db_path}"
    monkeypatch.setenv("DATABASE_URL", url)
    return url


@pytest.fixture
def client(db_url):
    # Entering the client runs the lifespan, so every test gets its own pool
    with TestClient(app) as c:
        yield c


@pytest.fixture
def broken_client(tmp_path, monkeypatch):
    # A database file without the todos table: every statement fails
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    with TestClient(app) as c:
        yield c
