"""
Shared test fixtures.

Provides an in-memory stand-in for the Supabase client that applies
filters, ordering and the products.article unique constraint, so import
and store behavior can be tested without a database.
"""

import os
import re
import sys
import threading
from datetime import datetime, timedelta
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings require these; tests never talk to a real project
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from unittest.mock import patch
from typing import Generator


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockAPIError(Exception):
    """Shape of postgrest's APIError: carries a Postgres error code."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)


class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data=None, count: int = None):
        self.data = data if data is not None else []
        self.count = count if count is not None else len(self.data)


def _like_to_regex(pattern: str) -> re.Pattern:
    parts = []
    for ch in pattern:
        if ch == "%":
            parts.append(".*")
        elif ch == "_":
            parts.append(".")
        else:
            parts.append(re.escape(ch))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


def _ilike(column: str, pattern: str):
    regex = _like_to_regex(pattern)
    return lambda row: row.get(column) is not None and bool(regex.fullmatch(str(row[column])))


class MockTable:
    """Rows of one table plus its unique columns."""

    def __init__(self, name: str, unique: tuple = ()):
        self.name = name
        self.rows: list[dict] = []
        self.unique = unique
        self.lock = threading.Lock()
        self.failures: dict[str, Exception] = {}
        self._next_id = 1
        self._clock = datetime(2025, 1, 1, 12, 0, 0)

    def next_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def tick(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat() + "Z"

    def seed(self, rows: list[dict]):
        for row in rows:
            row = dict(row)
            if "id" not in row:
                row["id"] = self.next_id()
            else:
                self._next_id = max(self._next_id, int(row["id"]) + 1)
            row.setdefault("created_at", self.tick())
            row.setdefault("updated_at", row["created_at"])
            self.rows.append(row)

    def check_unique(self, candidate: dict, ignore_id=None):
        for column in self.unique:
            if column not in candidate:
                continue
            for row in self.rows:
                if row["id"] != ignore_id and row.get(column) == candidate[column]:
                    raise MockAPIError(
                        "23505",
                        f'duplicate key value violates unique constraint "{self.name}_{column}_key"'
                    )


class MockSupabaseQuery:
    """Chainable query builder over a MockTable."""

    def __init__(self, table: MockTable, operation: str, payload=None, count=None):
        self._table = table
        self._operation = operation
        self._payload = payload
        self._count = count
        self._columns = "*"
        self._filters = []
        self._order = []
        self._limit = None
        self._offset = 0

    def select(self, columns: str = "*", count=None):
        self._columns = columns
        self._count = count
        return self

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self._filters.append(lambda row: row.get(column) != value)
        return self

    def ilike(self, column, pattern):
        self._filters.append(_ilike(column, pattern))
        return self

    def or_(self, filters: str):
        checks = []
        for part in filters.split(","):
            column, operator, value = part.split(".", 2)
            assert operator == "ilike", f"unsupported operator in mock: {operator}"
            checks.append(_ilike(column, value))
        self._filters.append(lambda row: any(check(row) for check in checks))
        return self

    def order(self, column, desc: bool = False):
        self._order.append((column, desc))
        return self

    def limit(self, count):
        self._limit = count
        return self

    def range(self, start, end):
        self._offset = start
        self._limit = end - start + 1
        return self

    def _matching(self) -> list[dict]:
        return [row for row in self._table.rows if all(f(row) for f in self._filters)]

    def _project(self, row: dict) -> dict:
        if self._columns == "*":
            return dict(row)
        return {c.strip(): row.get(c.strip()) for c in self._columns.split(",")}

    def execute(self) -> MockSupabaseResponse:
        table = self._table
        with table.lock:
            failure = table.failures.get(self._operation)
            if failure is not None:
                raise failure

            if self._operation == "insert":
                items = self._payload if isinstance(self._payload, list) else [self._payload]
                created = []
                for item in items:
                    table.check_unique(item)
                    now = table.tick()
                    row = {**item, "id": table.next_id(), "created_at": now, "updated_at": now}
                    table.rows.append(row)
                    created.append(dict(row))
                return MockSupabaseResponse(created)

            if self._operation == "update":
                updated = []
                for row in self._matching():
                    table.check_unique(self._payload, ignore_id=row["id"])
                    row.update(self._payload)
                    row["updated_at"] = table.tick()
                    updated.append(dict(row))
                return MockSupabaseResponse(updated)

            if self._operation == "delete":
                doomed = self._matching()
                table.rows = [row for row in table.rows if row not in doomed]
                return MockSupabaseResponse([dict(row) for row in doomed])

            rows = self._matching()
            for column, desc in reversed(self._order):
                present = [r for r in rows if r.get(column) is not None]
                missing = [r for r in rows if r.get(column) is None]
                present.sort(key=lambda r: r[column], reverse=desc)
                # Postgres default: NULLS LAST for ASC, NULLS FIRST for DESC
                rows = missing + present if desc else present + missing
            total = len(rows)
            rows = rows[self._offset:]
            if self._limit is not None:
                rows = rows[:self._limit]
            return MockSupabaseResponse([self._project(r) for r in rows], count=total)


class MockSupabaseTableRef:
    """What client.table(name) returns."""

    def __init__(self, table: MockTable):
        self._table = table

    def select(self, columns: str = "*", count=None):
        return MockSupabaseQuery(self._table, "select").select(columns, count=count)

    def insert(self, data):
        return MockSupabaseQuery(self._table, "insert", payload=data)

    def update(self, data):
        return MockSupabaseQuery(self._table, "update", payload=data)

    def delete(self):
        return MockSupabaseQuery(self._table, "delete")


class MockSupabaseClient:
    """In-memory Supabase client."""

    UNIQUE_COLUMNS = {"products": ("article",)}

    def __init__(self):
        self._tables: dict[str, MockTable] = {}

    def _get(self, name: str) -> MockTable:
        if name not in self._tables:
            self._tables[name] = MockTable(name, self.UNIQUE_COLUMNS.get(name, ()))
        return self._tables[name]

    def set_table_data(self, table_name: str, data: list):
        """Seed a table with rows."""
        table = self._get(table_name)
        table.rows = []
        table.seed(data)

    def rows(self, table_name: str) -> list[dict]:
        """Current rows of a table."""
        return [dict(row) for row in self._get(table_name).rows]

    def fail(self, table_name: str, operation: str, error: Exception):
        """Make every `operation` on the table raise `error`."""
        self._get(table_name).failures[operation] = error

    def table(self, name: str) -> MockSupabaseTableRef:
        return MockSupabaseTableRef(self._get(name))


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("products", [
                {"article": "A1", "name": "Mug"}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock and reset service singletons.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("products", [...])
            # Now any code using get_supabase_client() gets the mock
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.product_service.get_supabase_client", return_value=mock_supabase):
            with patch("services.product_service._product_service", None):
                with patch("services.import_service._import_service", None):
                    yield mock_supabase


@pytest.fixture
def product_service(mock_db):
    """ProductService bound to the mock database."""
    from services.product_service import ProductService
    return ProductService()


@pytest.fixture
def import_service(product_service):
    """ProductImportService bound to the mock database."""
    from services.import_service import ProductImportService
    return ProductImportService(product_service)


@pytest.fixture
def sample_product_data() -> dict:
    """Sample stored product row."""
    return {
        "id": 1,
        "article": "AB-1042",
        "name": "Кружка керамическая",
        "brand": "Luminarc",
        "price": 349.9,
        "color": "белый",
        "country": "Франция",
        "created_at": "2025-01-01T10:00:00Z",
        "updated_at": "2025-01-01T10:00:00Z"
    }


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_db):
    """
    Create FastAPI test client with mocked database.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("products", [...])
            response = test_client_with_mock_db.get("/api/products")
    """
    from fastapi.testclient import TestClient
    from main import app

    yield TestClient(app)
