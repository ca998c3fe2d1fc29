"""
Shared fixtures and fakes for executor/ tests.

Key fixtures:
- fake_executor: in-memory StatementExecutor that records every call and
  tracks whether each statement and cursor was closed exactly once.
- sqlite_engine: SQLAlchemy engine over a shared in-memory SQLite database
  seeded with a users table.
"""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from core.exceptions import ExecutionError
from executor.interfaces import ExecResult

# ====================
# Fake Executor
# ====================

class FakeCursor:
    """RowCursor over a list of rows, counting close() calls."""
    def __init__(self, rows, fail_after=None):
        self.rows = list(rows)
        self.fail_after = fail_after
        self.close_calls = 0

    def __iter__(self):
        for index, row in enumerate(self.rows):
            if self.fail_after is not None and index >= self.fail_after:
                raise ExecutionError("connection lost mid-iteration")
            yield row

    def first(self):
        return self.rows[0] if self.rows else None

    def close(self):
        self.close_calls += 1


class FakeStatement:
    """Statement recording exec/query calls and close() calls."""
    def __init__(self, executor, query):
        self.executor = executor
        self.query = query
        self.close_calls = 0
        self.cursors = []

    def exec(self, *args):
        self.executor.calls.append(('exec', self.query, args))
        if self.executor.exec_error is not None:
            raise self.executor.exec_error
        return ExecResult(rowcount=1)

    def query_rows(self, *args):
        self.executor.calls.append(('query', self.query, args))
        if self.executor.query_error is not None:
            raise self.executor.query_error
        cursor = FakeCursor(self.executor.rows, fail_after=self.executor.fail_after)
        self.cursors.append(cursor)
        return cursor

    def close(self):
        self.close_calls += 1


class FakeExecutor:
    """StatementExecutor double that keeps every handle it hands out."""
    def __init__(self, rows=None):
        self.rows = rows or []
        self.calls = []
        self.statements = []
        self.direct_cursors = []
        self.prepare_error = None
        self.exec_error = None
        self.query_error = None
        self.fail_after = None

    def prepare(self, query):
        self.calls.append(('prepare', query, ()))
        if self.prepare_error is not None:
            raise self.prepare_error
        statement = FakeStatement(self, query)
        self.statements.append(statement)
        return statement

    def exec_direct(self, query, *args):
        self.calls.append(('exec_direct', query, args))
        if self.exec_error is not None:
            raise self.exec_error
        return ExecResult(rowcount=1)

    def query_direct(self, query, *args):
        self.calls.append(('query_direct', query, args))
        if self.query_error is not None:
            raise self.query_error
        cursor = FakeCursor(self.rows, fail_after=self.fail_after)
        self.direct_cursors.append(cursor)
        return cursor

    def assert_all_released(self):
        """Every statement and cursor handed out was closed exactly once."""
        for statement in self.statements:
            assert statement.close_calls == 1, f"statement {statement.query!r} closed {statement.close_calls}x"
            for cursor in statement.cursors:
                assert cursor.close_calls == 1, f"cursor closed {cursor.close_calls}x"
        for cursor in self.direct_cursors:
            assert cursor.close_calls == 1, f"cursor closed {cursor.close_calls}x"


@pytest.fixture
def fake_executor():
    """Provide a FakeExecutor that returns no rows by default."""
    return FakeExecutor()


# ====================
# SQLite fixtures
# ====================

USERS_DDL = """
CREATE TABLE users (
    user_id INTEGER PRIMARY KEY,
    first_name TEXT,
    last_name TEXT,
    email TEXT,
    active INTEGER NOT NULL DEFAULT 1
)
"""

SEED_USERS = [
    (7, 'Annabel', 'Lee', 'ann@example.com', 1),
    (8, 'Bob', 'Stone', 'bob@example.com', 0),
]


@pytest.fixture
def sqlite_engine():
    """Shared in-memory SQLite engine with a seeded users table."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    with engine.begin() as conn:
        conn.exec_driver_sql(USERS_DDL)
        for row in SEED_USERS:
            conn.exec_driver_sql(
                "INSERT INTO users (user_id, first_name, last_name, email, active) VALUES (?, ?, ?, ?, ?)",
                row,
            )
    yield engine
    engine.dispose()


@pytest.fixture
def fetch_user(sqlite_engine):
    """Return a helper reading one users row back as a tuple."""
    def fetch(user_id):
        with sqlite_engine.connect() as conn:
            row = conn.exec_driver_sql(
                "SELECT user_id, first_name, last_name, email, active FROM users WHERE user_id = ?",
                (user_id,),
            ).fetchone()
        return tuple(row) if row is not None else None

    return fetch
