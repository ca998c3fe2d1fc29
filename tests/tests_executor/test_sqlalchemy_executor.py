"""
=====================================================
pytest suite for executor/sqlalchemy_executor.py
=====================================================

Sections:
---------
1. Unit tests - error translation with mocked SQLAlchemy objects
2. Integration tests - Engine and Connection binding against in-memory SQLite

How to Execute:
---------------
All tests:          pytest tests/tests_executor/test_sqlalchemy_executor.py -v
"""

from unittest.mock import MagicMock, Mock

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from core.exceptions import ExecutionError, PrepareError
from executor.interfaces import ExecResult
from executor.sqlalchemy_executor import (
    SQLAlchemyRowCursor,
    SQLAlchemyStatement,
    SQLAlchemyStatementExecutor,
)

# ===============
# 1. UNIT TESTS
# ===============

@pytest.mark.unit
@pytest.mark.parametrize("query", ["", "   ", None])
def test_prepare_rejects_empty_query(query):
    executor = SQLAlchemyStatementExecutor(Mock())

    with pytest.raises(PrepareError, match="empty"):
        executor.prepare(query)


@pytest.mark.unit
def test_prepare_connection_failure_is_prepare_error():
    engine = Mock()
    engine.connect.side_effect = OperationalError("connect", {}, Exception("refused"))

    with pytest.raises(PrepareError, match="Failed to prepare"):
        SQLAlchemyStatementExecutor(engine).prepare("SELECT 1")


@pytest.mark.unit
def test_exec_failure_rolls_back_and_closes_owned_connection():
    connection = MagicMock()
    connection.exec_driver_sql.side_effect = SQLAlchemyError("constraint failed")
    engine = Mock()
    engine.connect.return_value = connection

    with pytest.raises(ExecutionError, match="constraint failed"):
        SQLAlchemyStatementExecutor(engine).exec_direct("UPDATE t SET a = ?", 1)

    connection.rollback.assert_called_once()
    connection.commit.assert_not_called()
    connection.close.assert_called_once()


@pytest.mark.unit
def test_exec_passes_positional_tuple_to_driver():
    connection = MagicMock()
    connection.exec_driver_sql.return_value.rowcount = 3
    connection.exec_driver_sql.return_value.lastrowid = None
    engine = Mock()
    engine.connect.return_value = connection

    result = SQLAlchemyStatementExecutor(engine).exec_direct("UPDATE t SET a = ? WHERE b = ?", 'x', 2)

    connection.exec_driver_sql.assert_called_once_with("UPDATE t SET a = ? WHERE b = ?", ('x', 2))
    connection.commit.assert_called_once()
    assert result == ExecResult(rowcount=3, last_row_id=None)


@pytest.mark.unit
def test_no_args_send_no_parameters():
    connection = MagicMock()
    engine = Mock()
    engine.connect.return_value = connection

    SQLAlchemyStatementExecutor(engine).query_direct("SELECT 1")

    connection.exec_driver_sql.assert_called_once_with("SELECT 1", None)


@pytest.mark.unit
def test_query_failure_closes_owned_connection():
    connection = MagicMock()
    connection.exec_driver_sql.side_effect = SQLAlchemyError("no such table")
    engine = Mock()
    engine.connect.return_value = connection

    with pytest.raises(ExecutionError, match="no such table"):
        SQLAlchemyStatementExecutor(engine).query_direct("SELECT * FROM nope")

    connection.close.assert_called_once()


@pytest.mark.unit
def test_cursor_iteration_error_is_execution_error():
    result = MagicMock()
    result.__iter__.side_effect = SQLAlchemyError("disk I/O error")
    cursor = SQLAlchemyRowCursor(result)

    with pytest.raises(ExecutionError, match="disk I/O error"):
        list(cursor)


@pytest.mark.unit
def test_cursor_close_is_idempotent_and_releases_connection():
    result = Mock()
    connection = Mock()
    cursor = SQLAlchemyRowCursor(result, connection)

    cursor.close()
    cursor.close()

    result.close.assert_called_once()
    connection.close.assert_called_once()
    assert cursor.closed


@pytest.mark.unit
def test_statement_close_is_idempotent():
    connection = Mock()
    statement = SQLAlchemyStatement("SELECT 1", connection, owns_connection=True)

    statement.close()
    statement.close()

    connection.close.assert_called_once()


@pytest.mark.unit
def test_closed_statement_refuses_work():
    statement = SQLAlchemyStatement("SELECT 1", Mock(), owns_connection=True)
    statement.close()

    with pytest.raises(ExecutionError, match="closed"):
        statement.exec()
    with pytest.raises(ExecutionError, match="closed"):
        statement.query_rows()


# ======================
# 2. INTEGRATION TESTS
# ======================

@pytest.mark.integration
def test_engine_bound_exec_commits(sqlite_engine, fetch_user):
    executor = SQLAlchemyStatementExecutor(sqlite_engine)

    result = executor.exec_direct("UPDATE users SET last_name = ? WHERE user_id = ?", 'Poe', 7)

    assert result.rowcount == 1
    assert fetch_user(7)[2] == 'Poe'


@pytest.mark.integration
def test_prepared_statement_is_reusable(sqlite_engine, fetch_user):
    executor = SQLAlchemyStatementExecutor(sqlite_engine)
    statement = executor.prepare("UPDATE users SET active = ? WHERE user_id = ?")
    try:
        statement.exec(0, 7)
        statement.exec(1, 8)
    finally:
        statement.close()

    assert fetch_user(7)[4] == 0
    assert fetch_user(8)[4] == 1


@pytest.mark.integration
def test_statement_query_rows(sqlite_engine):
    executor = SQLAlchemyStatementExecutor(sqlite_engine)
    statement = executor.prepare("SELECT first_name FROM users WHERE user_id >= ? ORDER BY user_id")
    try:
        cursor = statement.query_rows(7)
        try:
            names = [row[0] for row in cursor]
        finally:
            cursor.close()
    finally:
        statement.close()

    assert names == ['Annabel', 'Bob']


@pytest.mark.integration
def test_bad_sql_is_execution_error(sqlite_engine):
    executor = SQLAlchemyStatementExecutor(sqlite_engine)

    with pytest.raises(ExecutionError):
        executor.exec_direct("UPDATE missing_table SET a = ?", 1)


@pytest.mark.integration
def test_connection_bound_executor_leaves_transaction_to_caller(sqlite_engine, fetch_user):
    with sqlite_engine.connect() as conn:
        executor = SQLAlchemyStatementExecutor(conn)
        assert not executor.owns_connections

        executor.exec_direct("UPDATE users SET first_name = ? WHERE user_id = ?", 'Temp', 7)
        cursor = executor.query_direct("SELECT first_name FROM users WHERE user_id = ?", 7)
        try:
            row = cursor.first()
        finally:
            cursor.close()
        assert row[0] == 'Temp'

        conn.rollback()
        assert not conn.closed

    assert fetch_user(7)[1] == 'Annabel'
