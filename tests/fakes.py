"""
In-memory stand-in for the Supabase client used by the services.

Covers the query-builder calls the app makes (select/insert/update/delete,
eq, in_, order, limit, execute) and the auth.get_user call. Unique keys, UUID
columns and the contacts -> unsubscribes cascade mirror supabase/schema.sql,
and violations raise postgrest's APIError with the Postgres error code.
"""

import copy
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError

UNIQUE_KEYS = {
    "users": [("id",)],
    "newsletters": [("id",)],
    "newsletter_users": [("newsletter_id", "user_id")],
    "contacts": [("id",), ("newsletter_id", "email")],
    "unsubscribes": [("contact_id",)],
    "user_profiles": [("id",), ("email",)],
}

CASCADES = {"contacts": [("unsubscribes", "contact_id", "id")]}

UUID_COLUMNS = {
    "newsletters": {"id"},
    "newsletter_users": {"newsletter_id"},
    "contacts": {"id", "newsletter_id"},
    "unsubscribes": {"contact_id"},
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_uuid(value) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def _defaults(table: str) -> Dict[str, Any]:
    if table == "users":
        return {"created_at": _now()}
    if table == "newsletters":
        return {"id": str(uuid.uuid4()), "status": "draft", "created_at": _now(),
                "last_sent_at": None, "description": None}
    if table == "newsletter_users":
        return {"role": "user"}
    if table == "contacts":
        return {"id": str(uuid.uuid4()), "subscribed_at": _now(),
                "first_name": None, "last_name": None}
    if table == "unsubscribes":
        return {"unsubscribed_at": _now()}
    return {}


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.operation = "select"
        self.columns: Optional[List[str]] = None
        self.payload: Any = None
        self.filters: List[tuple] = []
        self.ordering: Optional[tuple] = None
        self.row_limit: Optional[int] = None
        self.bad_literal: Optional[str] = None

    def select(self, columns: str = "*", **kwargs):
        self.operation = "select"
        cols = [c.strip() for c in columns.split(",")]
        self.columns = None if "*" in cols else cols
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.operation = "update"
        self.payload = payload
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        if column in UUID_COLUMNS.get(self.table, ()) and not _is_uuid(value):
            self.bad_literal = str(value)
        self.filters.append((column, lambda v, expected=value: v == expected))
        return self

    def in_(self, column, values):
        allowed = list(values)
        self.filters.append((column, lambda v: v in allowed))
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def _matches(self, row: Dict[str, Any]) -> bool:
        return all(check(row.get(column)) for column, check in self.filters)

    def _project(self, row: Dict[str, Any]) -> Dict[str, Any]:
        if self.columns is None:
            return copy.deepcopy(row)
        return {c: copy.deepcopy(row.get(c)) for c in self.columns}

    def execute(self):
        if self.table in self.db.failing_tables:
            raise APIError({"code": "XX000", "message": f"connection to {self.table} lost"})
        if self.bad_literal is not None:
            raise APIError({
                "code": "22P02",
                "message": f'invalid input syntax for type uuid: "{self.bad_literal}"',
            })
        rows = self.db.tables.setdefault(self.table, [])
        handler = getattr(self, f"_execute_{self.operation}")
        return SimpleNamespace(data=handler(rows), count=None)

    def _execute_select(self, rows):
        found = [r for r in rows if self._matches(r)]
        if self.ordering:
            column, desc = self.ordering
            found.sort(key=lambda r: (r.get(column) is None, r.get(column) or ""), reverse=desc)
        if self.row_limit is not None:
            found = found[:self.row_limit]
        return [self._project(r) for r in found]

    def _execute_insert(self, rows):
        payload = self.payload if isinstance(self.payload, list) else [self.payload]
        inserted = []
        for item in payload:
            row = {**_defaults(self.table), **item}
            self.db.check_unique(self.table, row)
            rows.append(row)
            inserted.append(copy.deepcopy(row))
        return inserted

    def _execute_update(self, rows):
        updated = []
        for row in rows:
            if self._matches(row):
                row.update(self.payload)
                updated.append(copy.deepcopy(row))
        return updated

    def _execute_delete(self, rows):
        removed = [r for r in rows if self._matches(r)]
        self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
        for child, fk, pk in CASCADES.get(self.table, []):
            gone = {r[pk] for r in removed}
            self.db.tables[child] = [r for r in self.db.tables.get(child, []) if r.get(fk) not in gone]
        return [copy.deepcopy(r) for r in removed]


class FakeAuth:
    def __init__(self):
        self.tokens: Dict[str, SimpleNamespace] = {}
        self.calls = 0

    def add_user(self, token: str, user_id: str, email: str):
        self.tokens[token] = SimpleNamespace(
            id=user_id,
            email=email,
            user_metadata={},
            app_metadata={},
            created_at=_now(),
            updated_at=None,
        )

    def get_user(self, jwt=None):
        self.calls += 1
        user = self.tokens.get(jwt)
        if user is None:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=user)


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.failing_tables: set = set()
        self.auth = FakeAuth()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> List[Dict[str, Any]]:
        return self.tables.setdefault(name, [])

    def seed(self, table: str, **row) -> Dict[str, Any]:
        full = {**_defaults(table), **row}
        self.check_unique(table, full)
        self.rows(table).append(full)
        return full

    def check_unique(self, table: str, row: Dict[str, Any]):
        for key in UNIQUE_KEYS.get(table, []):
            value = tuple(row.get(c) for c in key)
            if any(tuple(r.get(c) for c in key) == value for r in self.rows(table)):
                raise APIError({
                    "code": "23505",
                    "message": f'duplicate key value violates unique constraint "{table}_{"_".join(key)}_key"',
                })
