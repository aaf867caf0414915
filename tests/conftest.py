"""Shared fixtures.

Includes an in-memory stand-in for a PostgREST endpoint, served through
httpx.MockTransport so the remote storage backend runs its real HTTP
code against it.
"""

import json
from typing import Any

import httpx
import pytest

from uselessfacts.storage import (
    LocalFactStorage,
    LocalStore,
    RemoteFactStorage,
    SQLiteFactStorage,
)


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def _matches(row: dict[str, Any], key: str, expr: str) -> bool:
    value = _text(row.get(key))
    if expr.startswith("eq."):
        return value == expr[len("eq."):]
    if expr.startswith("not.in.("):
        return value not in expr[len("not.in.("):-1].split(",")
    raise AssertionError(f"Unsupported filter: {key}={expr}")


class FakePostgrest:
    """Tables as lists of dicts; records every request it receives."""

    def __init__(self, tables: dict[str, list[dict[str, Any]]] | None = None) -> None:
        self.tables = tables or {"facts": [], "submitted_facts": []}
        self.requests: list[httpx.Request] = []
        self.fail_methods: set[str] = set()

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=self.transport())

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method in self.fail_methods:
            return httpx.Response(500, json={"message": "internal error"})

        table = request.url.path.rsplit("/", 1)[-1]
        rows = self.tables.setdefault(table, [])
        params = dict(request.url.params)
        filters = {k: v for k, v in params.items() if k not in ("select", "order")}

        def selected() -> list[dict[str, Any]]:
            return [r for r in rows if all(_matches(r, k, v) for k, v in filters.items())]

        if request.method == "GET":
            result = selected()
            if params.get("order") == "createdAt.desc":
                result = sorted(result, key=lambda r: r.get("createdAt") or "", reverse=True)
            return httpx.Response(200, json=result)

        if request.method == "POST":
            body = json.loads(request.content)
            upsert = "merge-duplicates" in request.headers.get("Prefer", "")
            for record in body:
                existing = next((r for r in rows if r.get("id") == record.get("id")), None)
                if existing is not None and upsert:
                    existing.update(record)
                elif existing is not None:
                    return httpx.Response(409, json={"message": "duplicate key"})
                else:
                    rows.append(dict(record))
            if "return=minimal" in request.headers.get("Prefer", ""):
                return httpx.Response(201)
            return httpx.Response(201, json=body)

        if request.method == "PATCH":
            changes = json.loads(request.content)
            result = selected()
            for row in result:
                row.update(changes)
            return httpx.Response(200, json=result)

        if request.method == "DELETE":
            result = selected()
            self.tables[table] = [r for r in rows if r not in result]
            return httpx.Response(200, json=result)

        return httpx.Response(405)


@pytest.fixture
def postgrest():
    """Factory for a fake PostgREST server seeded with the given tables."""

    def _make(tables: dict[str, list[dict[str, Any]]] | None = None) -> FakePostgrest:
        return FakePostgrest(tables)

    return _make


@pytest.fixture(params=["local", "sqlite", "remote"])
def any_storage(request, tmp_path, postgrest):
    """Each storage backend in turn, starting from empty collections."""
    if request.param == "local":
        store = LocalStore(tmp_path / "data.json")
        store.set_item("facts_data", [])
        storage = LocalFactStorage(store)
    elif request.param == "sqlite":
        storage = SQLiteFactStorage(tmp_path / "facts.db")
        storage.init_db(seed=False)
    else:
        storage = RemoteFactStorage(
            "https://example.supabase.co",
            "anon-key",
            client=postgrest().client(),
        )
    yield storage
    storage.close()
