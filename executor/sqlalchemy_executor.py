"""
==========================================
SQLAlchemy-backed statement executor.
==========================================

Implements the StatementExecutor protocol on top of a SQLAlchemy Engine or
Connection. Query text is sent to the DB-API driver verbatim through
Connection.exec_driver_sql(), so placeholders must use the driver's
paramstyle (qmark '?' for sqlite3, pyodbc and friends).

Binding modes:
    - Engine: every statement and cursor checks out its own connection and
      returns it on close(); standalone writes commit before returning.
    - Connection: every handle reuses the caller's connection and never
      commits or closes it; the caller owns the transaction.

Example:
    >>> from sqlalchemy import create_engine
    >>> from executor.sqlalchemy_executor import SQLAlchemyStatementExecutor
    >>>
    >>> executor = SQLAlchemyStatementExecutor(create_engine("sqlite:///app.db"))
    >>> executor.exec_direct("UPDATE users SET first_name = ? WHERE user_id = ?", "Ann", 7)
    ExecResult(rowcount=1, last_row_id=...)
"""

import logging
from typing import Any, Iterator, Optional, Sequence, Tuple, Union

from sqlalchemy import Connection, Engine
from sqlalchemy.engine import CursorResult
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import ExecutionError, PrepareError
from executor.interfaces import ExecResult

logger = logging.getLogger(__name__)


def _driver_params(args: Sequence[Any]) -> Optional[Tuple[Any, ...]]:
    return tuple(args) if args else None


def _last_row_id(result: CursorResult) -> Optional[int]:
    try:
        return result.lastrowid
    except (AttributeError, SQLAlchemyError):
        return None


def _execute(connection: Connection, query: str, args: Sequence[Any], commit: bool) -> ExecResult:
    """Run one write on a connection and detach its outcome from the cursor."""
    try:
        result = connection.exec_driver_sql(query, _driver_params(args))
        exec_result = ExecResult(rowcount=result.rowcount, last_row_id=_last_row_id(result))
        result.close()
        if commit:
            connection.commit()
        return exec_result
    except SQLAlchemyError as e:
        if commit:
            connection.rollback()
        logger.error(f"Statement execution failed: {e}")
        raise ExecutionError(f"Failed to execute statement: {e}")


class SQLAlchemyRowCursor:
    """RowCursor over a SQLAlchemy CursorResult.

    When the cursor owns its connection (direct queries on an Engine), the
    connection is returned to the pool on close().
    """

    def __init__(self, result: CursorResult, connection: Optional[Connection] = None):
        self._result = result
        self._connection = connection
        self.closed = False

    def __iter__(self) -> Iterator[Sequence[Any]]:
        try:
            for row in self._result:
                yield row
        except SQLAlchemyError as e:
            logger.error(f"Failed to read result rows: {e}")
            raise ExecutionError(f"Failed to read result rows: {e}")

    def first(self) -> Optional[Sequence[Any]]:
        try:
            return self._result.fetchone()
        except SQLAlchemyError as e:
            logger.error(f"Failed to read result row: {e}")
            raise ExecutionError(f"Failed to read result row: {e}")

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        try:
            self._result.close()
        finally:
            if self._connection is not None:
                self._connection.close()


class SQLAlchemyStatement:
    """Statement handle bound to one connection for its whole lifetime."""

    def __init__(self, query: str, connection: Connection, owns_connection: bool):
        self.query = query
        self._connection = connection
        self._owns_connection = owns_connection
        self.closed = False

    def _check_open(self) -> None:
        if self.closed:
            raise ExecutionError("Statement is closed")

    def exec(self, *args: Any) -> ExecResult:
        self._check_open()
        return _execute(self._connection, self.query, args, commit=self._owns_connection)

    def query_rows(self, *args: Any) -> SQLAlchemyRowCursor:
        self._check_open()
        try:
            result = self._connection.exec_driver_sql(self.query, _driver_params(args))
        except SQLAlchemyError as e:
            logger.error(f"Query failed: {e}")
            raise ExecutionError(f"Failed to run query: {e}")
        return SQLAlchemyRowCursor(result)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._owns_connection:
            self._connection.close()


class SQLAlchemyStatementExecutor:
    """StatementExecutor over a SQLAlchemy Engine or Connection.

    Attributes:
        bind: Engine (connection per handle) or Connection (shared, caller-owned)
    """

    def __init__(self, bind: Union[Engine, Connection]):
        self.bind = bind

    @property
    def owns_connections(self) -> bool:
        """True when handles check out and close their own connections."""
        return not isinstance(self.bind, Connection)

    def _connect(self) -> Connection:
        if isinstance(self.bind, Connection):
            return self.bind
        return self.bind.connect()

    def prepare(self, query: str) -> SQLAlchemyStatement:
        """
        Open a statement handle for query.

        exec_driver_sql has no separate compile step, so only empty text and
        connection failures raise PrepareError here. Invalid SQL is reported
        as ExecutionError when the statement runs.
        """
        if not query or not query.strip():
            raise PrepareError("Cannot prepare an empty query")

        try:
            connection = self._connect()
        except SQLAlchemyError as e:
            logger.error(f"Failed to open connection for statement: {e}")
            raise PrepareError(f"Failed to prepare statement: {e}")

        return SQLAlchemyStatement(query, connection, owns_connection=self.owns_connections)

    def exec_direct(self, query: str, *args: Any) -> ExecResult:
        try:
            connection = self._connect()
        except SQLAlchemyError as e:
            logger.error(f"Failed to open connection: {e}")
            raise ExecutionError(f"Failed to execute statement: {e}")

        try:
            return _execute(connection, query, args, commit=self.owns_connections)
        finally:
            if self.owns_connections:
                connection.close()

    def query_direct(self, query: str, *args: Any) -> SQLAlchemyRowCursor:
        try:
            connection = self._connect()
        except SQLAlchemyError as e:
            logger.error(f"Failed to open connection: {e}")
            raise ExecutionError(f"Failed to run query: {e}")

        try:
            result = connection.exec_driver_sql(query, _driver_params(args))
        except SQLAlchemyError as e:
            if self.owns_connections:
                connection.close()
            logger.error(f"Query failed: {e}")
            raise ExecutionError(f"Failed to run query: {e}")

        return SQLAlchemyRowCursor(result, connection if self.owns_connections else None)
