"""In-memory stand-in for the Supabase table query builder.

Supports the subset of PostgREST filters the services use, so claim state
transitions can be asserted against real row contents instead of mocked
call chains.
"""

import copy
import re
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from postgrest.exceptions import APIError as PostgrestAPIError


def _as_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def _ilike(pattern: str) -> re.Pattern[str]:
    parts = [".*" if ch in "%*" else "." if ch == "_" else re.escape(ch) for ch in pattern]
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE)


def _condition(column: str, op: str, value: str) -> Callable[[dict[str, Any]], bool]:
    value = _unquote(value)
    if op == "eq":
        return lambda row: row.get(column) is not None and str(row.get(column)) == value
    if op == "is" and value == "null":
        return lambda row: row.get(column) is None
    if op == "gt":
        return lambda row: row.get(column) is not None and _as_datetime(row[column]) > _as_datetime(value)
    raise NotImplementedError(f"or_ operator {op!r}")


class FakeResponse:
    def __init__(self, data: Any, count: int | None = None) -> None:
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str) -> None:
        self.db = db
        self.table = table
        self.action = "select"
        self.payload: Any = None
        self.filters: list[Callable[[dict[str, Any]], bool]] = []
        self.order_by: tuple[str, bool] | None = None
        self.limit_n: int | None = None
        self.single = False
        self.count_mode: str | None = None

    # actions
    def select(self, *columns: str, count: str | None = None) -> "FakeQuery":
        self.action = "select"
        self.count_mode = count
        return self

    def insert(self, payload: dict[str, Any] | list[dict[str, Any]]) -> "FakeQuery":
        self.action = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict[str, Any]) -> "FakeQuery":
        self.action = "update"
        self.payload = payload
        return self

    # filters
    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column: str, values: list[Any]) -> "FakeQuery":
        allowed = list(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        regex = _ilike(pattern)
        self.filters.append(lambda row: row.get(column) is not None and bool(regex.match(str(row[column]))))
        return self

    def or_(self, expression: str) -> "FakeQuery":
        conditions = []
        for clause in expression.split(","):
            column, op, value = clause.split(".", 2)
            conditions.append(_condition(column, op, value))
        self.filters.append(lambda row: any(cond(row) for cond in conditions))
        return self

    # modifiers
    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.order_by = (column, desc)
        return self

    def limit(self, n: int) -> "FakeQuery":
        self.limit_n = n
        return self

    def maybe_single(self) -> "FakeQuery":
        self.single = True
        return self

    def _matches(self) -> list[dict[str, Any]]:
        return [row for row in self.db.rows(self.table) if all(f(row) for f in self.filters)]

    def execute(self) -> FakeResponse:
        self.db.calls.append((self.table, self.action))
        if (self.table, self.action) in self.db.failures:
            raise PostgrestAPIError({"message": "simulated failure", "code": "XX000", "hint": None, "details": None})

        if self.action == "insert":
            payloads = self.payload if isinstance(self.payload, list) else [self.payload]
            created = [self.db.insert(self.table, p) for p in payloads]
            return FakeResponse(copy.deepcopy(created))

        if self.action == "update":
            for hook in list(self.db.before_update):
                hook(self)
            matched = self._matches()
            for row in matched:
                row.update(copy.deepcopy(self.payload))
            return FakeResponse(copy.deepcopy(matched))

        matched = self._matches()
        if self.order_by:
            column, desc = self.order_by
            matched.sort(key=lambda row: str(row.get(column) or ""), reverse=desc)
        total = len(matched)
        if self.limit_n is not None:
            matched = matched[: self.limit_n]
        rows = copy.deepcopy(matched)
        count = total if self.count_mode else None
        if self.single:
            return FakeResponse(rows[0] if rows else None, count)
        return FakeResponse(rows, count)


class FakeSupabase:
    """Minimal Supabase client double backed by per-table row lists."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.failures: set[tuple[str, str]] = set()
        self.before_update: list[Callable[[FakeQuery], None]] = []
        self.calls: list[tuple[str, str]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.setdefault(table, [])

    def insert(self, table: str, payload: dict[str, Any]) -> dict[str, Any]:
        row = copy.deepcopy(payload)
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self.rows(table).append(row)
        return row

    def get(self, table: str, row_id: str) -> dict[str, Any]:
        return next(row for row in self.rows(table) if row["id"] == row_id)

    def add_profile(self, **fields: Any) -> dict[str, Any]:
        now = datetime.now(timezone.utc).isoformat()
        profile = {
            "id": str(uuid.uuid4()),
            "username": None,
            "display_name": None,
            "owner_user_id": None,
            "legacy_user_id": None,
            "is_primary": False,
            "is_hidden": False,
            "claim_status": "unclaimed",
            "claim_token_hash": None,
            "claim_expires_at": None,
            "claimed_at": None,
            "created_at": now,
            "updated_at": now,
        }
        profile.update(fields)
        return self.insert("profiles", profile)
