"""
=====================================================
DrySql: prepared-statement facade and record updates.
=====================================================

DrySql wraps a StatementExecutor so every exec and query follows the same
lifecycle: prepare, notify the observer, run, and release the statement and
cursor on every exit path. It also turns partially-populated tagged records
into single UPDATE statements.

Example:
    >>> from dataclasses import dataclass
    >>> from typing import Optional
    >>> from executor.drysql import DrySql
    >>> from sql.records import column
    >>>
    >>> @dataclass
    ... class UserUpdate:
    ...     user_id: int = column('user_id')
    ...     first_name: Optional[str] = column('first_name')
    ...     last_name: Optional[str] = column('last_name')
    >>>
    >>> db = DrySql.from_url("sqlite:///app.db")
    >>> db.update_table_row_from_record('users', 'user_id', UserUpdate(user_id=7, first_name='Ann'))
    >>> # UPDATE users SET first_name = ? WHERE user_id = ?  with ['Ann', 7]
    >>>
    >>> names = []
    >>> db.prepared_query("SELECT first_name FROM users WHERE active = ?", [1],
    ...                   lambda row: names.append(row[0]))
"""

import logging
from contextlib import closing
from typing import Any, Callable, Optional, Sequence

from core.exceptions import NoRowsError, ScanError
from executor.interfaces import ExecResult, RowCursor, StatementExecutor
from executor.sqlalchemy_executor import SQLAlchemyStatementExecutor
from logs.sql_observer import NullSqlObserver, SqlObserver
from sql.dml import compile_update
from utils.database_utils import create_sqlalchemy_engine

logger = logging.getLogger(__name__)

RowScanner = Callable[[Sequence[Any]], None]


class DrySql:
    """Facade over a statement executor.

    Attributes:
        executor: StatementExecutor every operation is delegated to
        observer: SqlObserver notified once per prepared read or write

    Example:
        >>> db = DrySql(SQLAlchemyStatementExecutor(engine), observer=SqlOperationCounter())
        >>> db.prepared_exec("DELETE FROM sessions WHERE user_id = ?", [7])
    """

    def __init__(self, executor: StatementExecutor, observer: Optional[SqlObserver] = None):
        self.executor = executor
        self.observer = observer if observer is not None else NullSqlObserver()

    @classmethod
    def from_url(
        cls,
        url: Optional[str] = None,
        observer: Optional[SqlObserver] = None,
        **engine_kwargs
    ) -> "DrySql":
        """
        Build a DrySql over a new SQLAlchemy engine.

        Args:
            url: Database URL (defaults to config.database_url)
            observer: Optional SqlObserver
            **engine_kwargs: Extra keyword arguments for create_engine()
        """
        engine = create_sqlalchemy_engine(url, **engine_kwargs)
        return cls(SQLAlchemyStatementExecutor(engine), observer=observer)

    def prepared_exec(self, query: str, inputs: Sequence[Any] = ()) -> ExecResult:
        """
        Prepare a statement, execute it once with inputs, and close it.

        Returns:
            ExecResult of the execution
        """
        with closing(self.executor.prepare(query)) as statement:
            self.observer.record_write()
            return statement.exec(*inputs)

    def exec_without_prepare(self, query: str, *args: Any) -> ExecResult:
        """Execute query text directly; the observer is not notified."""
        return self.executor.exec_direct(query, *args)

    def query_row(
        self,
        query: str,
        inputs: Sequence[Any] = (),
        row_factory: Optional[Callable[[Sequence[Any]], Any]] = None
    ) -> Any:
        """
        Fetch a single row through a prepared statement.

        Args:
            query: SELECT text with positional placeholders
            inputs: Positional arguments
            row_factory: Optional callable turning the row into the caller's shape

        Returns:
            The first row, passed through row_factory when given

        Raises:
            NoRowsError: If the query returned no rows
            ScanError: If row_factory rejects the row
        """
        with closing(self.executor.prepare(query)) as statement:
            self.observer.record_read()
            with closing(statement.query_rows(*inputs)) as cursor:
                row = cursor.first()

        if row is None:
            raise NoRowsError(f"No rows returned by query: {query}")

        if row_factory is None:
            return row

        try:
            return row_factory(row)
        except (TypeError, ValueError) as e:
            raise ScanError(f"Failed to scan row: {e}")

    def prepared_query(self, query: str, inputs: Sequence[Any], scanner: RowScanner) -> None:
        """
        Run a prepared query and hand every row to scanner.

        An exception raised by scanner stops the iteration and propagates
        unchanged, after the cursor and statement are closed.
        """
        with closing(self.executor.prepare(query)) as statement:
            self.observer.record_read()
            with closing(statement.query_rows(*inputs)) as cursor:
                self._scan_rows(cursor, scanner)

    def query_without_prepare(self, query: str, scanner: RowScanner) -> None:
        """Run query text directly and hand every row to scanner."""
        with closing(self.executor.query_direct(query)) as cursor:
            self._scan_rows(cursor, scanner)

    @staticmethod
    def _scan_rows(cursor: RowCursor, scanner: RowScanner) -> None:
        for row in cursor:
            scanner(row)

    def update_table_row_from_record(
        self,
        table_name: str,
        row_identifier_column: str,
        record: Any,
        optional_conditional: str = ''
    ) -> Optional[ExecResult]:
        """
        Update one row from the populated fields of a tagged record.

        Only tagged fields with a present value are written. The field tagged
        with row_identifier_column (compared ignoring case) selects the row.
        optional_conditional is appended to the WHERE clause with AND.

        The statement text varies with the populated fields, so it is executed
        directly rather than prepared.

        Returns:
            ExecResult, or None when the record has nothing to update (no
            statement is executed in that case)

        Raises:
            ConversionError: If a field value cannot be bound
            MissingRowIdentifierError: If the identifier field is unset
            UnsupportedRecordError: If record is not a tagged record
            ExecutionError: If the store rejects the statement
        """
        plan = compile_update(table_name, row_identifier_column, record, optional_conditional)
        if plan is None:
            logger.debug(f"Skipping update of {table_name}: nothing to update")
            return None

        self.observer.record_write()
        return self.executor.exec_direct(plan.query, *plan.args)
