"""In-memory stand-in for the supabase-py client, used only by tests.

Implements the subset of the query builder the services call
(select/insert/upsert/update/delete, eq/in_/order/limit, execute) plus
rpc() and the auth / auth.admin calls.
"""

import copy
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

UNIQUE_KEYS = {
    "permissions": [("name",)],
    "roles": [("name",)],
    "role_permissions": [("role_id", "permission_id")],
    "user_roles": [("user_id", "role_id")],
    "profiles": [("id",)],
}

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


class FakeAPIError(Exception):
    pass


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table_name = table
        self.operation = "select"
        self.columns = "*"
        self.payload: Any = None
        self.on_conflict: Optional[str] = None
        self.ignore_duplicates = False
        self.filters: List[Callable[[dict], bool]] = []
        self.order_by: Optional[tuple] = None
        self.row_limit: Optional[int] = None

    # Builders
    def select(self, columns: str = "*"):
        self.operation = "select"
        self.columns = columns
        return self

    def insert(self, rows):
        self.operation = "insert"
        self.payload = rows
        return self

    def upsert(self, rows, on_conflict: str = "", ignore_duplicates: bool = False):
        self.operation = "upsert"
        self.payload = rows
        self.on_conflict = on_conflict
        self.ignore_duplicates = ignore_duplicates
        return self

    def update(self, values: dict):
        self.operation = "update"
        self.payload = values
        return self

    def delete(self):
        self.operation = "delete"
        return self

    # Filters
    def eq(self, column: str, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column: str, values):
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, size: int):
        self.row_limit = size
        return self

    def execute(self) -> FakeResponse:
        if (self.table_name, self.operation) in self.db.fail_on:
            raise FakeAPIError(f"{self.operation} on {self.table_name} failed")
        handler = getattr(self, f"_{self.operation}")
        data = handler()
        self.db.log.append((self.table_name, self.operation))
        if self.operation != "select":
            for hook in list(self.db.after_write):
                hook(self.db, self.table_name, self.operation)
        return FakeResponse(data)

    # Operations
    def _rows(self) -> List[dict]:
        return self.db.tables.setdefault(self.table_name, [])

    def _matching(self) -> List[dict]:
        return [row for row in self._rows() if all(f(row) for f in self.filters)]

    def _select(self):
        rows = self._matching()
        if self.order_by:
            column, desc = self.order_by
            rows = sorted(rows, key=lambda r: (r.get(column) is None, r.get(column) or ""), reverse=desc)
        if self.row_limit is not None:
            rows = rows[:self.row_limit]
        if self.columns.strip() == "*":
            return [copy.deepcopy(r) for r in rows]
        columns = [c.strip() for c in self.columns.split(",")]
        return [{c: copy.deepcopy(r.get(c)) for c in columns} for r in rows]

    def _insert(self):
        rows = self.payload if isinstance(self.payload, list) else [self.payload]
        inserted = []
        for row in rows:
            row = self.db.with_defaults(self.table_name, dict(row))
            if self.db.find_conflict(self.table_name, row) is not None:
                raise FakeAPIError(f"duplicate key value violates unique constraint on {self.table_name}")
            self._rows().append(row)
            inserted.append(copy.deepcopy(row))
        return inserted

    def _upsert(self):
        rows = self.payload if isinstance(self.payload, list) else [self.payload]
        keys = tuple(c.strip() for c in self.on_conflict.split(",")) if self.on_conflict else None
        written = []
        for row in rows:
            existing = None
            if keys:
                existing = next(
                    (r for r in self._rows() if all(r.get(k) == row.get(k) for k in keys)),
                    None,
                )
            if existing is not None:
                if self.ignore_duplicates:
                    continue
                existing.update(row)
                written.append(copy.deepcopy(existing))
                continue
            row = self.db.with_defaults(self.table_name, dict(row))
            self._rows().append(row)
            written.append(copy.deepcopy(row))
        return written

    def _update(self):
        rows = self._matching()
        for row in rows:
            row.update(self.payload)
        return [copy.deepcopy(r) for r in rows]

    def _delete(self):
        rows = self._matching()
        self.db.tables[self.table_name] = [r for r in self._rows() if not any(r is m for m in rows)]
        return [copy.deepcopy(r) for r in rows]


class FakeRPC:
    def __init__(self, db: "FakeSupabase", name: str, params: dict):
        self.db = db
        self.name = name
        self.params = params

    def execute(self) -> FakeResponse:
        if ("rpc", self.name) in self.db.fail_on:
            raise FakeAPIError(f"function {self.name} failed")
        self.db.rpc_calls.append((self.name, self.params))
        return FakeResponse(None)


class FakeAuthAdmin:
    def __init__(self):
        self.identities: List[dict] = []
        self.updates: List[tuple] = []
        self.deleted: List[str] = []
        self.fail_list = False
        self.fail_update = False
        self.fail_delete = False

    def list_users(self, page: int = 1, per_page: int = 50):
        if self.fail_list:
            raise FakeAPIError("User not allowed")
        start = (page - 1) * per_page
        return [copy.deepcopy(u) for u in self.identities[start:start + per_page]]

    def update_user_by_id(self, uid: str, attributes: dict):
        if self.fail_update:
            raise FakeAPIError("User not allowed")
        self.updates.append((uid, attributes))
        return SimpleNamespace(user=SimpleNamespace(id=uid))

    def delete_user(self, uid: str, should_soft_delete: bool = False):
        if self.fail_delete:
            raise FakeAPIError("User not found")
        self.deleted.append(uid)
        self.identities = [u for u in self.identities if u["id"] != uid]


class FakeAuth:
    def __init__(self):
        self.admin = FakeAuthAdmin()
        self.tokens: Dict[str, SimpleNamespace] = {}

    def get_user(self, jwt: Optional[str] = None):
        user = self.tokens.get(jwt)
        if user is None:
            raise FakeAPIError("invalid JWT")
        return SimpleNamespace(user=user)


class FakeSupabase:
    def __init__(self):
        self.tables: Dict[str, List[dict]] = {}
        self.auth = FakeAuth()
        self.rpc_calls: List[tuple] = []
        self.log: List[tuple] = []
        self.fail_on = set()
        self.after_write: List[Callable] = []
        self._clock = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rpc(self, name: str, params: Optional[dict] = None) -> FakeRPC:
        return FakeRPC(self, name, params or {})

    def rows(self, table: str) -> List[dict]:
        return self.tables.get(table, [])

    def with_defaults(self, table: str, row: dict) -> dict:
        if table in ("roles", "permissions"):
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", self._tick())
        if table == "roles":
            row.setdefault("description", None)
            row.setdefault("disabled", False)
        if table == "user_roles":
            row.setdefault("assigned_at", self._tick())
        if table == "profiles":
            row.setdefault("is_active", True)
        return row

    def find_conflict(self, table: str, row: dict) -> Optional[dict]:
        for keys in UNIQUE_KEYS.get(table, []):
            for existing in self.rows(table):
                if all(existing.get(k) == row.get(k) for k in keys):
                    return existing
        return None

    def _tick(self) -> str:
        self._clock += 1
        return (BASE_TIME + timedelta(seconds=self._clock)).isoformat()

    # Seeding helpers
    def add_role(self, name: str, description: Optional[str] = None) -> str:
        return self.table("roles").insert({"name": name, "description": description}).execute().data[0]["id"]

    def add_user(
        self,
        user_id: str,
        email: Optional[str] = None,
        token: Optional[str] = None,
        role_id: Optional[str] = None,
        metadata_key: str = "user_metadata",
        metadata: Optional[dict] = None,
    ) -> None:
        self.auth.admin.identities.append({"id": user_id, "email": email, metadata_key: metadata or {}})
        if token:
            self.auth.tokens[token] = SimpleNamespace(id=user_id, email=email)
        if role_id:
            self.table("user_roles").insert({"user_id": user_id, "role_id": role_id}).execute()

    def roles_of(self, user_id: str) -> List[str]:
        return [r["role_id"] for r in self.rows("user_roles") if r["user_id"] == user_id]
