import asyncio

import pytest
import pytest_asyncio

from todo_api.db import TodoRepository, build_engine
from todo_api.errors import StorageError, TodoNotFoundError
from todo_api.models import ListQuery
from todo_api.settings import get_settings


@pytest_asyncio.fixture
async def repo(db_url):
    engine = build_engine(get_settings())
    try:
        yield TodoRepository(engine)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def broken_repo(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'missing.db'}")
    engine = build_engine(get_settings())
    try:
        yield TodoRepository(engine)
    finally:
        await engine.dispose()


@pytest.mark.asyncio
async def test_create_then_get_round_trips(repo):
    for text in ["buy milk", "", "ünïcödé ✓", "x" * 5000]:
        created = await repo.create(text)
        assert created["description"] == text
        assert created["completed"] is False

        fetched = await repo.get(created["id"])
        assert fetched == created


@pytest.mark.asyncio
async def test_ids_are_assigned_by_database(repo):
    first = await repo.create("a")
    second = await repo.create("b")
    assert second["id"] > first["id"]


@pytest.mark.asyncio
async def test_list_defaults_to_empty_page(repo):
    await repo.create("a")
    assert await repo.list() == []
    assert await repo.list(ListQuery(offset=0, limit=0)) == []


@pytest.mark.asyncio
async def test_list_windows_in_id_order(repo):
    created = [await repo.create(f"item {i}") for i in range(5)]

    page = await repo.list(ListQuery(offset=1, limit=3))
    assert page == created[1:4]

    tail = await repo.list(ListQuery(offset=4, limit=3))
    assert tail == created[4:]


@pytest.mark.asyncio
async def test_update_overwrites_both_columns(repo):
    todo = await repo.create("walk dog")

    updated = await repo.update(todo["id"], completed=True)
    assert updated == {"id": todo["id"], "description": "", "completed": True}

    updated = await repo.update(todo["id"], description="walk cat")
    assert updated == {"id": todo["id"], "description": "walk cat", "completed": False}

    assert await repo.get(todo["id"]) == updated


@pytest.mark.asyncio
async def test_update_with_nothing_resets_row(repo):
    todo = await repo.create("something")
    await repo.update(todo["id"], description="something", completed=True)

    updated = await repo.update(todo["id"])
    assert updated == {"id": todo["id"], "description": "", "completed": False}


@pytest.mark.asyncio
async def test_delete_returns_last_state_then_not_found(repo):
    todo = await repo.create("temp")
    await repo.update(todo["id"], description="temp", completed=True)

    deleted = await repo.delete(todo["id"])
    assert deleted == {"id": todo["id"], "description": "temp", "completed": True}

    with pytest.raises(TodoNotFoundError) as excinfo:
        await repo.get(todo["id"])
    assert excinfo.value.todo_id == todo["id"]


@pytest.mark.asyncio
@pytest.mark.parametrize("op", ["get", "update", "delete"])
async def test_by_id_operations_raise_not_found(repo, op):
    with pytest.raises(TodoNotFoundError):
        await getattr(repo, op)(12345)


@pytest.mark.asyncio
async def test_not_found_is_a_storage_error(repo):
    with pytest.raises(StorageError, match="Todo 7 not found"):
        await repo.get(7)


@pytest.mark.asyncio
async def test_database_failures_become_storage_errors(broken_repo):
    with pytest.raises(StorageError, match="no such table: todos") as excinfo:
        await broken_repo.list(ListQuery(limit=5))
    assert not isinstance(excinfo.value, TodoNotFoundError)
    # The driver error stays attached for server-side logging
    assert excinfo.value.__cause__ is not None


@pytest.mark.asyncio
async def test_concurrent_creates_share_the_pool(repo):
    created = await asyncio.gather(*(repo.create(f"job {i}") for i in range(10)))
    ids = [t["id"] for t in created]
    assert len(set(ids)) == 10

    listed = await repo.list(ListQuery(limit=100))
    assert sorted(ids) == [t["id"] for t in listed]
