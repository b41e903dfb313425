"""
In-memory stand-in for the part of the Supabase client the repositories use

Supports table().select/insert/update/upsert/delete with eq, in_, ilike,
is_, order and limit, server defaults for id and created_at, unique
constraints that raise the same APIError PostgREST would, and failure
injection per table.
"""
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
import copy
import re
import uuid

from postgrest.exceptions import APIError

UNIQUE = {
    "profiles": [("id",), ("username",)],
    "habits": [("id",), ("user_id", "name")],
    "follows": [("follower_id", "followee_id")],
    "check_ins": [("id",)],
}
CASE_INSENSITIVE = {("profiles", "username")}
GENERATED_IDS = {"habits", "check_ins"}


def _as_datetime(value):
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def _same(a, b):
    if a == b:
        return True
    da, db = _as_datetime(a), _as_datetime(b)
    return da is not None and db is not None and da == db


def _like_to_regex(pattern):
    out = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if ch == "%":
            out.append(".*")
        elif ch == "_":
            out.append(".")
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out), re.IGNORECASE | re.DOTALL)


def _sort_key(value):
    moment = _as_datetime(value)
    if moment is not None:
        return (0, moment.timestamp())
    return (1, value)


class FakeQuery:
    def __init__(self, db, table_name):
        self.db = db
        self.table_name = table_name
        self.op = None
        self.payload = None
        self.columns = "*"
        self.filters = []
        self.ordering = []
        self.row_limit = None
        self.on_conflict = None
        self.ignore_duplicates = False

    # -- operations --------------------------------------------------------

    def select(self, columns="*"):
        self.op = "select"
        self.columns = columns
        return self

    def insert(self, data):
        self.op = "insert"
        self.payload = data
        return self

    def upsert(self, data, on_conflict="", ignore_duplicates=False):
        self.op = "upsert"
        self.payload = data
        self.on_conflict = on_conflict
        self.ignore_duplicates = ignore_duplicates
        return self

    def update(self, data):
        self.op = "update"
        self.payload = data
        return self

    def delete(self):
        self.op = "delete"
        return self

    # -- filters -----------------------------------------------------------

    def eq(self, column, value):
        self.filters.append(lambda row: _same(row.get(column), value))
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def ilike(self, column, pattern):
        regex = _like_to_regex(pattern)
        self.filters.append(lambda row: row.get(column) is not None and regex.fullmatch(row[column]) is not None)
        return self

    def is_(self, column, value):
        assert value == "null", "fake only supports is_(column, 'null')"
        self.filters.append(lambda row: row.get(column) is None)
        return self

    def order(self, column, desc=False):
        self.ordering.append((column, desc))
        return self

    def limit(self, size):
        self.row_limit = size
        return self

    # -- execution ---------------------------------------------------------

    def execute(self):
        self.db.queries.append((self.table_name, self.op))
        failure = self.db.pop_failure(self.table_name, self.op)
        if failure is not None:
            raise failure
        for hook in list(self.db.hooks):
            hook(self)
        return SimpleNamespace(data=getattr(self, f"_run_{self.op}")())

    def _matching(self):
        return [row for row in self.db.tables.setdefault(self.table_name, [])
                if all(f(row) for f in self.filters)]

    def _project(self, row):
        if self.columns.strip() == "*":
            return copy.deepcopy(row)
        wanted = [c.strip() for c in self.columns.split(",")]
        return {c: copy.deepcopy(row.get(c)) for c in wanted}

    def _run_select(self):
        rows = self._matching()
        for column, desc in reversed(self.ordering):
            rows = sorted(rows, key=lambda r: _sort_key(r.get(column)), reverse=desc)
        if self.row_limit is not None:
            rows = rows[:self.row_limit]
        return [self._project(row) for row in rows]

    def _with_defaults(self, data):
        row = dict(data)
        if self.table_name in GENERATED_IDS and not row.get("id"):
            row["id"] = str(uuid.uuid4())
        row.setdefault("created_at", self.db.now.isoformat())
        return row

    def _conflicts(self, row, ignore_self=None):
        for columns in UNIQUE.get(self.table_name, []):
            for existing in self.db.tables.setdefault(self.table_name, []):
                if existing is ignore_self:
                    continue
                if all(self._key(c, existing.get(c)) == self._key(c, row.get(c)) for c in columns):
                    return columns
        return None

    def _key(self, column, value):
        if (self.table_name, column) in CASE_INSENSITIVE and isinstance(value, str):
            return value.lower()
        return value

    def _violation(self, columns):
        return APIError({
            "code": "23505",
            "message": f"duplicate key value violates unique constraint on {self.table_name}{columns}",
            "details": None,
            "hint": None,
        })

    def _run_insert(self):
        payload = self.payload if isinstance(self.payload, list) else [self.payload]
        created = []
        for data in payload:
            row = self._with_defaults(data)
            columns = self._conflicts(row)
            if columns:
                raise self._violation(columns)
            self.db.tables[self.table_name].append(row)
            created.append(copy.deepcopy(row))
        return created

    def _run_upsert(self):
        payload = self.payload if isinstance(self.payload, list) else [self.payload]
        written = []
        for data in payload:
            row = self._with_defaults(data)
            if self._conflicts(row):
                if self.ignore_duplicates:
                    continue
                raise NotImplementedError("fake upsert only supports ignore_duplicates=True")
            self.db.tables[self.table_name].append(row)
            written.append(copy.deepcopy(row))
        return written

    def _run_update(self):
        updated = []
        for row in self._matching():
            candidate = {**row, **self.payload}
            columns = self._conflicts(candidate, ignore_self=row)
            if columns:
                raise self._violation(columns)
            row.update(copy.deepcopy(self.payload))
            updated.append(copy.deepcopy(row))
        return updated

    def _run_delete(self):
        doomed = self._matching()
        self.db.tables[self.table_name] = [
            row for row in self.db.tables[self.table_name] if row not in doomed
        ]
        return [copy.deepcopy(row) for row in doomed]


class FakeSupabase:
    """Drop-in for supabase.Client.table() backed by dict rows"""

    def __init__(self, now=None):
        self.tables = {name: [] for name in UNIQUE}
        self.queries = []
        self.hooks = []
        self.now = now or datetime(2024, 5, 15, 19, 0, 0, 123456, tzinfo=timezone.utc)
        self._failures = []

    def table(self, name):
        return FakeQuery(self, name)

    def seed(self, table_name, **row):
        """Insert a row directly, bypassing constraints; returns it"""
        if table_name in GENERATED_IDS:
            row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self.now.isoformat())
        self.tables.setdefault(table_name, []).append(row)
        return row

    def rows(self, table_name):
        return self.tables.setdefault(table_name, [])

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)

    def fail_next(self, table_name, op, error):
        """Make the next `op` against `table_name` raise `error`"""
        self._failures.append((table_name, op, error))

    def pop_failure(self, table_name, op):
        for i, (t, o, error) in enumerate(self._failures):
            if t == table_name and o == op:
                del self._failures[i]
                return error
        return None


def foreign_key_violation(table_name, column):
    """The APIError PostgREST returns when a write references a missing row"""
    return APIError({
        "code": "23503",
        "message": f'insert or update on table "{table_name}" violates foreign key constraint',
        "details": f"Key ({column}) is not present in table \"profiles\".",
        "hint": None,
    })
