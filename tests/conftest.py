from __future__ import annotations

import copy
import itertools
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote

import pytest

from vacsite._constants import STORAGE_PREFIX
from vacsite._transport import RestResponse
from vacsite.cache.events import Broadcaster
from vacsite.cache.storage import MemoryStorage
from vacsite.cache.store import DurableStore

_CONTROL_PARAMS = {"select", "order", "limit", "offset", "on_conflict", "or"}
_STORAGE_PREFIX = STORAGE_PREFIX + "/"


def _fmt(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _matches(row: Mapping[str, Any], column: str, operand: str) -> bool:
    value = row.get(column)
    if operand == "is.null":
        return value is None
    if operand.startswith("eq."):
        return _fmt(value) == operand[3:]
    if operand.startswith("in.(") and operand.endswith(")"):
        wanted = {item.strip().strip('"') for item in operand[4:-1].split(",")}
        return _fmt(value) in wanted
    raise AssertionError(f"Unsupported filter {column}={operand}")


def _matches_or(row: Mapping[str, Any], group: str) -> bool:
    for clause in group.strip("()").split(","):
        column, op, pattern = clause.split(".", 2)
        assert op == "ilike", clause
        if pattern.strip("*").lower() in str(row.get(column) or "").lower():
            return True
    return False


def _sort(rows: list[dict[str, Any]], order_by: str) -> list[dict[str, Any]]:
    for part in reversed(order_by.split(",")):
        column, _, direction = part.partition(".")
        present = [row for row in rows if row.get(column) is not None]
        missing = [row for row in rows if row.get(column) is None]
        present.sort(key=lambda row: row[column], reverse=direction == "desc")
        rows = present + missing
    return rows


@dataclass
class FakeRestBackend:
    """In-memory stand-in for the hosted REST backend.

    Supports the subset of PostgREST used by vacsite: ``eq``/``is``/``in``
    filters, ``or`` ilike groups, ordering, paging, single-object reads,
    inserts, upserts, patches and deletes, plus the password grant and
    the storage bucket upload/list/delete calls.
    """

    tables: dict[str, list[dict[str, Any]]] = field(default_factory=dict)
    calls: list[tuple[str, str, dict[str, str]]] = field(default_factory=list)
    tokens: list[str | None] = field(default_factory=list)
    failures: dict[tuple[str, str], Exception | RestResponse] = field(default_factory=dict)
    objects: dict[str, dict[str, dict[str, Any]]] = field(default_factory=dict)
    uploads: dict[str, bytes] = field(default_factory=dict)
    admin_email: str = "admin@example.com"
    admin_password: str = "correct-horse"
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    def seed(self, table: str, *rows: dict[str, Any]) -> None:
        for row in rows:
            self._insert(table, row)

    def fail(self, table: str, error: Exception | RestResponse, *, method: str = "GET") -> None:
        self.failures[(method, table)] = error

    def heal(self) -> None:
        self.failures.clear()

    def count(self, method: str, table: str) -> int:
        return sum(1 for m, t, _ in self.calls if m == method and t == table)

    def _insert(self, table: str, row: Mapping[str, Any]) -> dict[str, Any]:
        n = next(self._ids)
        stored = dict(row)
        stored.setdefault("id", f"{table}-{n}")
        stored.setdefault("created_at", f"2026-01-01T00:{n // 60:02d}:{n % 60:02d}Z")
        self.tables.setdefault(table, []).append(stored)
        return stored

    def _select(self, table: str, params: Mapping[str, str]) -> list[dict[str, Any]]:
        rows = [row for row in self.tables.get(table, []) if self._row_matches(row, params)]
        if "order" in params:
            rows = _sort(rows, params["order"])
        offset = int(params.get("offset", 0))
        rows = rows[offset:]
        if "limit" in params:
            rows = rows[: int(params["limit"])]
        columns = params.get("select", "*")
        if columns != "*":
            keep = columns.split(",")
            rows = [{key: row.get(key) for key in keep} for row in rows]
        return copy.deepcopy(rows)

    def _row_matches(self, row: Mapping[str, Any], params: Mapping[str, str]) -> bool:
        for column, operand in params.items():
            if column == "or":
                if not _matches_or(row, operand):
                    return False
            elif column not in _CONTROL_PARAMS and not _matches(row, column, operand):
                return False
        return True

    def _auth(self, body: Mapping[str, Any]) -> RestResponse:
        if body.get("email") != self.admin_email or body.get("password") != self.admin_password:
            return RestResponse(400, {"error": "invalid_grant", "error_description": "Invalid login credentials"})
        return RestResponse(
            200,
            {
                "access_token": "admin-access-token",
                "refresh_token": "admin-refresh-token",
                "expires_in": 3600,
                "user": {"id": "admin-1", "email": self.admin_email},
            },
        )

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json_body: Any = None,
        content: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        access_token: str | None = None,
    ) -> RestResponse:
        params = dict(params or {})
        headers = dict(headers or {})
        if path == "/auth/v1/token":
            self.calls.append((method, "auth", params))
            return self._auth(json_body or {})
        if path.startswith(_STORAGE_PREFIX):
            storage_path = path[len(_STORAGE_PREFIX) :]
            return self._storage_request(method, storage_path, json_body, content, headers, access_token)

        assert content is None, path
        assert path.startswith("/rest/v1/"), path
        table = path[len("/rest/v1/") :]
        self.calls.append((method, table, params))
        self.tokens.append(access_token)

        failure = self.failures.get((method, table))
        if isinstance(failure, Exception):
            raise failure
        if isinstance(failure, RestResponse):
            return failure

        if method == "GET":
            rows = self._select(table, params)
            if headers.get("accept") == "application/vnd.pgrst.object+json":
                if len(rows) != 1:
                    return RestResponse(406, {"code": "PGRST116", "message": "JSON object requested, 0 rows"})
                return RestResponse(200, rows[0])
            return RestResponse(200, rows)

        if method == "POST":
            saved = []
            conflict = params.get("on_conflict")
            for row in json_body:
                existing = None
                if conflict:
                    existing = next(
                        (r for r in self.tables.get(table, []) if r.get(conflict) == row.get(conflict)),
                        None,
                    )
                if existing is not None:
                    existing.update(row)
                    saved.append(dict(existing))
                else:
                    saved.append(dict(self._insert(table, row)))
            if headers.get("prefer") == "return=minimal":
                return RestResponse(201, None)
            return RestResponse(201, saved)

        if method == "PATCH":
            touched = []
            for row in self.tables.get(table, []):
                if self._row_matches(row, params):
                    row.update(json_body)
                    touched.append(dict(row))
            return RestResponse(200, touched)

        if method == "DELETE":
            self.tables[table] = [row for row in self.tables.get(table, []) if not self._row_matches(row, params)]
            return RestResponse(204, None)

        raise AssertionError(f"Unexpected method {method}")

    def _storage_request(
        self,
        method: str,
        path: str,
        json_body: Any,
        content: bytes | None,
        headers: Mapping[str, str],
        access_token: str | None,
    ) -> RestResponse:
        listing = path.startswith("list/")
        bucket, _, name = (path[len("list/") :] if listing else path).partition("/")
        name = unquote(name)
        table = f"storage/{bucket}"
        self.calls.append((method, table, {"name": name} if name else {}))
        self.tokens.append(access_token)

        failure = self.failures.get((method, table))
        if isinstance(failure, Exception):
            raise failure
        if isinstance(failure, RestResponse):
            return failure

        objects = self.objects.setdefault(bucket, {})
        if method == "POST" and listing:
            prefix = json_body.get("prefix") or ""
            entries = [entry for entry in objects.values() if entry["name"].startswith(prefix)]
            entries.sort(key=lambda entry: entry["created_at"], reverse=True)
            offset = int(json_body.get("offset", 0))
            entries = entries[offset : offset + int(json_body.get("limit", 100))]
            return RestResponse(200, copy.deepcopy(entries))

        if method == "POST":
            assert content is not None, name
            if name in objects and headers.get("x-upsert") != "true":
                return RestResponse(
                    400,
                    {"statusCode": "409", "error": "Duplicate", "message": "The resource already exists"},
                )
            n = next(self._ids)
            objects[name] = {
                "name": name,
                "id": f"object-{n}",
                "created_at": f"2026-01-01T00:{n // 60:02d}:{n % 60:02d}Z",
                "metadata": {"size": len(content), "mimetype": headers.get("content-type")},
            }
            self.uploads[name] = content
            return RestResponse(200, {"Key": f"{bucket}/{name}"})

        if method == "DELETE":
            removed = [objects.pop(prefix) for prefix in json_body["prefixes"] if prefix in objects]
            return RestResponse(200, removed)

        raise AssertionError(f"Unexpected storage call {method} {path}")


@pytest.fixture
def backend() -> FakeRestBackend:
    return FakeRestBackend()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def broadcaster() -> Broadcaster:
    return Broadcaster()


@pytest.fixture
def store(storage: MemoryStorage, broadcaster: Broadcaster) -> DurableStore:
    return DurableStore(storage, broadcaster, namespace="test")
