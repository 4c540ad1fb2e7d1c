# =============================================================================
# tests/fakes.py - In-Memory Supabase Stand-In
# =============================================================================
# A small fake of the supabase-py client surface the services use:
# - table(...).select/insert/update/delete with eq, neq, or_, range,
#   order, limit, single and execute
# - auth.sign_up / auth.sign_in_with_password
# - storage.from_(bucket).upload / get_public_url
# - throwaway auth clients that share one account store
#
# Column lists in select() are ignored; whole rows come back.
# Failures can be injected per (table, operation).
# =============================================================================

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any
from uuid import uuid4

# Well-known ids used across tests
ALICE_ID = "11111111-1111-4111-8111-111111111111"
BOB_ID = "22222222-2222-4222-8222-222222222222"
CAROL_ID = "33333333-3333-4333-8333-333333333333"


class FakeAPIError(Exception):
    """Mimics a PostgREST APIError (message carries the code)."""


@dataclass
class FakeResponse:
    data: Any
    count: int | None = None


def _same(actual: Any, expected: Any) -> bool:
    if isinstance(actual, bool) or isinstance(expected, bool):
        return actual is expected or actual == expected
    return str(actual) == str(expected)


def _ilike(actual: Any, pattern: str) -> bool:
    if actual is None:
        return False
    needle = pattern.strip("%").lower()
    return needle in str(actual).lower()


class FakeQuery:
    """Chainable query builder over one table's rows."""

    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._op = "select"
        self._payload: Any = None
        self._filters: list = []
        self._count: str | None = None
        self._head = False
        self._order: list[tuple[str, bool]] = []
        self._range: tuple[int, int] | None = None
        self._limit: int | None = None
        self._single = False

    # -- operations ---------------------------------------------------------

    def select(self, columns: str = "*", count: str | None = None, head: bool = False):
        self._op = "select"
        self._count = count
        self._head = head
        return self

    def insert(self, data):
        self._op = "insert"
        self._payload = data
        return self

    def update(self, data):
        self._op = "update"
        self._payload = data
        return self

    def delete(self):
        self._op = "delete"
        return self

    # -- filters ------------------------------------------------------------

    def eq(self, column: str, value: Any):
        self._filters.append(lambda row: _same(row.get(column), value))
        return self

    def neq(self, column: str, value: Any):
        self._filters.append(lambda row: not _same(row.get(column), value))
        return self

    def or_(self, expression: str):
        clauses = []
        for part in expression.split(","):
            column, op, value = part.split(".", 2)
            clauses.append((column, op, value))

        def matches(row):
            for column, op, value in clauses:
                if op == "ilike" and _ilike(row.get(column), value):
                    return True
                if op == "eq" and _same(row.get(column), value):
                    return True
            return False

        self._filters.append(matches)
        return self

    def order(self, column: str, desc: bool = False):
        self._order.append((column, desc))
        return self

    def range(self, start: int, end: int):
        self._range = (start, end)
        return self

    def limit(self, size: int):
        self._limit = size
        return self

    def single(self):
        self._single = True
        return self

    # -- execution ----------------------------------------------------------

    def _matching(self) -> list[dict]:
        rows = self._db.tables.setdefault(self._table, [])
        return [row for row in rows if all(f(row) for f in self._filters)]

    def execute(self) -> FakeResponse:
        kind = "count" if self._head else self._op
        error = self._db.errors.get((self._table, kind))
        if error is not None:
            raise error

        if self._op == "insert":
            return FakeResponse(data=self._db.insert(self._table, self._payload))

        if self._op == "update":
            updated = []
            for row in self._matching():
                row.update(copy.deepcopy(self._payload))
                updated.append(copy.deepcopy(row))
            return FakeResponse(data=updated)

        if self._op == "delete":
            doomed = self._matching()
            self._db.tables[self._table] = [
                row for row in self._db.tables[self._table] if row not in doomed
            ]
            return FakeResponse(data=copy.deepcopy(doomed))

        rows = self._matching()
        total = len(rows)

        for column, desc in reversed(self._order):
            rows = sorted(
                rows,
                key=lambda r: (r.get(column) is None, r.get(column) or ""),
                reverse=desc,
            )
        if self._range is not None:
            start, end = self._range
            rows = rows[start:end + 1]
        if self._limit is not None:
            rows = rows[:self._limit]

        rows = copy.deepcopy(rows)
        count = total if self._count else None

        if self._head:
            return FakeResponse(data=[], count=count)
        if self._single:
            if len(rows) != 1:
                raise FakeAPIError(
                    "{'code': 'PGRST116', 'message': 'JSON object requested, multiple (or no) rows returned'}"
                )
            return FakeResponse(data=rows[0], count=count)
        return FakeResponse(data=rows, count=count)


@dataclass
class FakeBucket:
    name: str
    uploads: dict[str, dict] = field(default_factory=dict)

    def upload(self, path: str, file: bytes, file_options: dict | None = None):
        self.uploads[path] = {"content": file, "options": file_options or {}}
        return SimpleNamespace(path=path)

    def get_public_url(self, path: str) -> str:
        return f"https://test-project.supabase.co/storage/v1/object/public/{self.name}/{path}"


class FakeStorage:
    def __init__(self):
        self.buckets: dict[str, FakeBucket] = {}

    def from_(self, bucket: str) -> FakeBucket:
        return self.buckets.setdefault(bucket, FakeBucket(bucket))


class FakeAuth:
    """
    Accepts any sign-up; sign-in needs a previously signed-up password.

    Like supabase-py, a successful sign-up or sign-in switches the owning
    client's Authorization header to the user's access token.
    """

    def __init__(self, owner, accounts: dict[str, tuple[str, str]] | None = None):
        self.owner = owner
        self.accounts = accounts if accounts is not None else {}

    def _response(self, user_id: str, email: str) -> SimpleNamespace:
        access_token = f"access-{user_id}"
        self.owner.options.headers["Authorization"] = f"Bearer {access_token}"
        return SimpleNamespace(
            user=SimpleNamespace(id=user_id, email=email),
            session=SimpleNamespace(
                access_token=access_token,
                refresh_token=f"refresh-{user_id}",
                expires_in=3600,
            ),
        )

    def sign_up(self, credentials: dict) -> SimpleNamespace:
        user_id = str(uuid4())
        self.accounts[credentials["email"]] = (user_id, credentials["password"])
        return self._response(user_id, credentials["email"])

    def sign_in_with_password(self, credentials: dict) -> SimpleNamespace:
        user_id, password = self.accounts[credentials["email"]]
        assert password == credentials["password"]
        return self._response(user_id, credentials["email"])


class FakeAuthClient:
    """Throwaway client handed out for one auth call."""

    def __init__(self, accounts: dict[str, tuple[str, str]]):
        self.options = SimpleNamespace(headers={"Authorization": "Bearer test-anon-key"})
        self.auth = FakeAuth(self, accounts)


class FakeSupabase:
    """In-memory replacement for a supabase `Client`."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.errors: dict[tuple[str, str], Exception] = {}
        self.storage = FakeStorage()
        self.options = SimpleNamespace(headers={"Authorization": "Bearer test-anon-key"})
        self.accounts: dict[str, tuple[str, str]] = {}
        self.auth = FakeAuth(self, self.accounts)
        self.auth_clients: list[FakeAuthClient] = []

    def new_auth_client(self) -> FakeAuthClient:
        """Stand-in for SupabaseClient.create_auth_client; accounts are shared."""
        client = FakeAuthClient(self.accounts)
        self.auth_clients.append(client)
        return client

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def insert(self, table: str, data: dict | list[dict]) -> list[dict]:
        rows = data if isinstance(data, list) else [data]
        inserted = []
        for row in rows:
            row = copy.deepcopy(row)
            row.setdefault("id", str(uuid4()))
            row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
            self.tables.setdefault(table, []).append(row)
            inserted.append(copy.deepcopy(row))
        return inserted

    def fail(self, table: str, operation: str, error: Exception | None = None) -> None:
        """Make the next queries of this kind raise (operation: select, count, insert, update, delete)."""
        self.errors[(table, operation)] = error or FakeAPIError(f"{table} {operation} failed")


def seed_users(db: FakeSupabase) -> None:
    """Three users whose names exercise the search filter."""
    db.insert("users", [
        {
            "id": ALICE_ID,
            "full_name": "John Doe",
            "display_name": "johnd",
            "email": "john@example.com",
            "location": "London",
            "latitude": 51.5074,
            "longitude": -0.1278,
            "rating": 4.6,
            "created_at": "2024-01-01T00:00:00+00:00",
        },
        {
            "id": BOB_ID,
            "full_name": "Joan Smith",
            "display_name": "joans",
            "email": "joan@example.com",
            "location": "Paris",
            "latitude": 48.8566,
            "longitude": 2.3522,
            "created_at": "2024-01-02T00:00:00+00:00",
        },
        {
            "id": CAROL_ID,
            "full_name": "Mary Major",
            "display_name": "mm",
            "email": "mary@example.com",
            "created_at": "2024-01-03T00:00:00+00:00",
        },
    ])
