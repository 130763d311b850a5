"""
HTMX Todos: HTTP Endpoint Tests
=================================

What:  End-to-end behaviour of the routes against a real (temporary) SQLite
       database through an in-process HTTPX client.
"""

import asyncio
import logging
import re

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from htmx_todo.services.todo_service import TodoService

ITEM_OPEN = '<div class="flex flex-row space-x-3">'


def _todo_id(fragment: str) -> int:
    return int(re.search(r'hx-delete="/todos/(\d+)"', fragment).group(1))


def _is_checked(fragment: str) -> bool:
    return '<input type="checkbox" checked ' in fragment


async def _create(client, content: str) -> str:
    response = await client.post("/todos", data={"content": content})
    assert response.status_code == 200
    return response.text


class TestPageShell:

    @pytest.mark.asyncio
    async def test_index_serves_full_page(self, test_client):
        response = await test_client.get("/")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert response.text.startswith("<!DOCTYPE html>")
        assert 'hx-get="/todos"' in response.text
        assert "https://unpkg.com/htmx.org@1.9.3" in response.text
        assert "https://cdn.tailwindcss.com" in response.text


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_returns_unchecked_item(self, test_client):
        fragment = await _create(test_client, "buy milk")

        assert fragment.startswith(ITEM_OPEN)
        assert "<p>buy milk</p>" in fragment
        assert not _is_checked(fragment)

    @pytest.mark.asyncio
    async def test_create_assigns_fresh_ids(self, test_client):
        first = _todo_id(await _create(test_client, "one"))
        second = _todo_id(await _create(test_client, "two"))

        assert second != first

    @pytest.mark.asyncio
    async def test_ids_are_not_reused_after_delete(self, test_client):
        first = _todo_id(await _create(test_client, "one"))
        await test_client.delete(f"/todos/{first}")

        second = _todo_id(await _create(test_client, "two"))

        assert second > first

    @pytest.mark.asyncio
    async def test_create_empty_content_rejected(self, test_client):
        response = await test_client.post("/todos", data={"content": ""})

        assert response.status_code == 422
        assert response.json()["error"] == "request_validation_error"

        listing = await test_client.get("/todos")
        assert listing.text.count(ITEM_OPEN) == 0

    @pytest.mark.asyncio
    async def test_create_missing_content_rejected(self, test_client):
        response = await test_client.post("/todos", data={})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_escapes_markup(self, test_client):
        fragment = await _create(test_client, "<b>bold</b>")

        assert "<p>&lt;b&gt;bold&lt;/b&gt;</p>" in fragment


class TestList:

    @pytest.mark.asyncio
    async def test_empty_list_has_only_form(self, test_client):
        response = await test_client.get("/todos")

        assert response.status_code == 200
        assert response.text.count(ITEM_OPEN) == 0
        assert 'hx-post="/todos"' in response.text

    @pytest.mark.asyncio
    async def test_list_returns_every_created_todo_in_order(self, test_client):
        contents = ["alpha", "beta", "gamma", "delta"]
        ids = [_todo_id(await _create(test_client, c)) for c in contents]

        response = await test_client.get("/todos")
        body = response.text

        assert body.count(ITEM_OPEN) == len(contents)
        assert [int(i) for i in re.findall(r'hx-delete="/todos/(\d+)"', body)] == ids
        assert re.findall(r"<p>(.*?)</p>", body) == contents


class TestToggle:

    @pytest.mark.asyncio
    async def test_toggle_twice_restores_state(self, test_client):
        todo_id = _todo_id(await _create(test_client, "buy milk"))

        once = await test_client.post(f"/todos/toggle/{todo_id}")
        twice = await test_client.post(f"/todos/toggle/{todo_id}")

        assert once.status_code == 200
        assert _is_checked(once.text)
        assert "<p>buy milk</p>" in once.text
        assert _todo_id(once.text) == todo_id
        assert twice.status_code == 200
        assert not _is_checked(twice.text)

    @pytest.mark.asyncio
    async def test_toggle_missing_todo_is_not_found(self, test_client):
        response = await test_client.post("/todos/toggle/424242")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_toggle_non_numeric_id_rejected(self, test_client):
        response = await test_client.post("/todos/toggle/abc")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_concurrent_toggles_both_apply(self, test_client):
        todo_id = _todo_id(await _create(test_client, "race"))

        responses = await asyncio.gather(
            test_client.post(f"/todos/toggle/{todo_id}"),
            test_client.post(f"/todos/toggle/{todo_id}"),
        )

        assert [r.status_code for r in responses] == [200, 200]
        assert sorted(_is_checked(r.text) for r in responses) == [False, True]
        listing = await test_client.get("/todos")
        assert not _is_checked(listing.text)


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_todo(self, test_client):
        keep = _todo_id(await _create(test_client, "keep"))
        drop = _todo_id(await _create(test_client, "drop"))

        response = await test_client.delete(f"/todos/{drop}")

        assert response.status_code == 200
        assert response.text == ""
        listing = (await test_client.get("/todos")).text
        assert "<p>drop</p>" not in listing
        assert f'hx-delete="/todos/{keep}"' in listing

    @pytest.mark.asyncio
    async def test_delete_missing_todo_is_noop(self, test_client):
        await _create(test_client, "survivor")
        before = (await test_client.get("/todos")).text

        response = await test_client.delete("/todos/999999")

        assert response.status_code == 200
        assert (await test_client.get("/todos")).text == before

    @pytest.mark.asyncio
    async def test_delete_non_numeric_id_rejected(self, test_client):
        response = await test_client.delete("/todos/abc")

        assert response.status_code == 422


class TestScenario:

    @pytest.mark.asyncio
    async def test_create_toggle_delete(self, test_client):
        created = await _create(test_client, "buy milk")
        assert "buy milk" in created
        assert not _is_checked(created)
        todo_id = _todo_id(created)

        toggled = await test_client.post(f"/todos/toggle/{todo_id}")
        assert "buy milk" in toggled.text
        assert _is_checked(toggled.text)

        await test_client.delete(f"/todos/{todo_id}")
        listing = await test_client.get("/todos")
        assert "buy milk" not in listing.text


class TestAmbient:

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/todos")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/todos", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_not_found_body_carries_request_id(self, test_client):
        response = await test_client.post(
            "/todos/toggle/5", headers={"X-Request-ID": "trace-404"}
        )

        assert response.json()["request_id"] == "trace-404"

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "connected"

    @pytest.mark.asyncio
    async def test_malformed_request_id_replaced(self, test_client):
        response = await test_client.get("/todos", headers={"X-Request-ID": "x" * 200})

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_access_log_marks_htmx_requests(self, test_client, caplog):
        caplog.set_level(logging.INFO, logger="htmx_todo.access")

        await test_client.get("/todos", headers={"HX-Request": "true", "X-Request-ID": "log-1"})

        lines = [r.getMessage() for r in caplog.records if r.name == "htmx_todo.access"]
        assert len(lines) == 1
        assert lines[0].startswith("GET /todos 200 ")
        assert " htmx [log-1] " in lines[0]


async def _fail(self, *args, **kwargs):
    raise OperationalError("COMMIT", {}, Exception("database is locked"))


class TestStorageFailure:

    @pytest.mark.asyncio
    async def test_failed_read_is_server_error(self, test_client, monkeypatch):
        monkeypatch.setattr(AsyncSession, "execute", _fail)

        response = await test_client.get("/todos", headers={"X-Request-ID": "db-1"})

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"
        assert response.json()["request_id"] == "db-1"
        assert response.headers["X-Request-ID"] == "db-1"

    @pytest.mark.asyncio
    async def test_failed_commit_on_create_is_server_error(self, test_client, monkeypatch):
        monkeypatch.setattr(AsyncSession, "commit", _fail)

        response = await test_client.post("/todos", data={"content": "buy milk"})

        assert response.status_code == 500
        assert response.json()["error"] == "server_error"
        assert "buy milk" not in response.text

        monkeypatch.undo()
        listing = await test_client.get("/todos")
        assert listing.text.count(ITEM_OPEN) == 0

    @pytest.mark.asyncio
    async def test_failed_commit_on_toggle_keeps_state(self, test_client, monkeypatch):
        todo_id = _todo_id(await _create(test_client, "buy milk"))
        monkeypatch.setattr(AsyncSession, "commit", _fail)

        response = await test_client.post(f"/todos/toggle/{todo_id}")

        assert response.status_code == 500
        monkeypatch.undo()
        listing = await test_client.get("/todos")
        assert "<p>buy milk</p>" in listing.text
        assert not _is_checked(listing.text)

    @pytest.mark.asyncio
    async def test_failed_commit_on_delete_keeps_row(self, test_client, monkeypatch):
        todo_id = _todo_id(await _create(test_client, "buy milk"))
        monkeypatch.setattr(AsyncSession, "commit", _fail)

        response = await test_client.delete(f"/todos/{todo_id}")

        assert response.status_code == 500
        monkeypatch.undo()
        listing = await test_client.get("/todos")
        assert f'hx-delete="/todos/{todo_id}"' in listing.text


@pytest_asyncio.fixture
async def lenient_client(app):
    """Client that returns the 500 response instead of re-raising the app's exception."""
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestUnexpectedError:

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_request_id_header(self, lenient_client, monkeypatch):
        async def explode(self, db):
            raise RuntimeError("boom")

        monkeypatch.setattr(TodoService, "list_todos", explode)

        response = await lenient_client.get("/todos", headers={"X-Request-ID": "rid-1"})

        assert response.status_code == 500
        assert response.json()["error"] == "internal_server_error"
        assert response.json()["request_id"] == "rid-1"
        assert response.headers["X-Request-ID"] == "rid-1"

    @pytest.mark.asyncio
    async def test_unexpected_error_is_access_logged(self, lenient_client, monkeypatch, caplog):
        async def explode(self, db):
            raise RuntimeError("boom")

        monkeypatch.setattr(TodoService, "list_todos", explode)
        caplog.set_level(logging.INFO, logger="htmx_todo.access")

        await lenient_client.get("/todos")

        access = [r for r in caplog.records if r.name == "htmx_todo.access"]
        assert len(access) == 1
        assert access[0].levelno == logging.ERROR
        assert access[0].getMessage().startswith("GET /todos 500 ")
