from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import NullPool

from main import create_app
from storefront.database import Base, create_engine_from_url
from storefront.store.sql_store import SqlCatalogStore

ADMIN_SECRET = "Tienda-Admin-2025"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def sql_store(tmp_path):
    db_path = tmp_path / "catalog.db"

    # schema through a plain sync engine so no event loop is needed here
    sync_engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    # NullPool: TestClient may drive requests from different event loops
    engine = create_engine_from_url(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    return SqlCatalogStore(engine)


@pytest.fixture
def admin_password(monkeypatch):
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_SECRET)
    return ADMIN_SECRET


@pytest.fixture
def admin_headers(admin_password):
    return {"X-Admin-Password": admin_password}


@pytest.fixture
def client(sql_store):
    return TestClient(create_app(store=sql_store))


# ====================== FAKE SUPABASE ======================

class FakeQuery:
    """Just enough of the postgrest query builder for the catalog store."""

    def __init__(self, backend, table):
        self.backend = backend
        self.table = table
        self.op = None
        self.payload = None
        self.filters = []
        self.order_by = None
        self.limit_n = None

    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, payload):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload):
        self.op = "update"
        self.payload = payload
        return self

    def delete(self):
        self.op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.limit_n = n
        return self

    def _matches(self, row):
        return all(row.get(col) == val for col, val in self.filters)

    def execute(self):
        self.backend.calls.append(self)
        if self.backend.error is not None:
            raise self.backend.error

        rows = self.backend.rows
        if self.op == "insert":
            self.backend.next_id += 1
            row = dict(self.payload)
            row["id"] = self.backend.next_id
            row["created_at"] = datetime.now(timezone.utc).isoformat()
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])

        matched = [r for r in rows if self._matches(r)]
        if self.op == "update":
            for r in matched:
                r.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in matched])
        if self.op == "delete":
            self.backend.rows = [r for r in rows if not self._matches(r)]
            return SimpleNamespace(data=[dict(r) for r in matched])

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda r: r[column], reverse=desc)
        if self.limit_n is not None:
            matched = matched[: self.limit_n]
        return SimpleNamespace(data=[dict(r) for r in matched])


class FakeSupabase:
    def __init__(self):
        self.rows = []
        self.next_id = 0
        self.error = None
        self.calls = []
        self.tables = []

    def table(self, name):
        self.tables.append(name)
        return FakeQuery(self, name)


@pytest.fixture
def fake_supabase():
    return FakeSupabase()
