"""Statement executor interface definitions.

This module provides lightweight typing Protocols for the database client the
DrySql facade drives, so the facade and its tests depend on abstractions
instead of a concrete driver.

Implemented by `executor.sqlalchemy_executor.SQLAlchemyStatementExecutor`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Optional, Protocol, Sequence


@dataclass(frozen=True)
class ExecResult:
    """Outcome of a write, detached from any driver resource.

    Attributes:
        rowcount: Rows affected, or -1 when the driver cannot tell
        last_row_id: Driver-reported id of the last inserted row, if any
    """

    rowcount: int
    last_row_id: Optional[int] = None


class RowCursor(Protocol):
    """Lazy, forward-only, single-pass sequence of result rows.

    The operation that opened a cursor must close it, including when it stops
    iterating early.
    """

    def __iter__(self) -> Iterator[Sequence[Any]]:
        """Iterate over the remaining rows."""
        ...

    def first(self) -> Optional[Sequence[Any]]:
        """Return the next row, or None when the result is exhausted."""
        ...

    def close(self) -> None:
        """Release the underlying result. Safe to call more than once."""
        ...


class Statement(Protocol):
    """Reusable handle for a parameterized query."""

    query: str

    def exec(self, *args: Any) -> ExecResult:
        """Bind positional arguments and execute."""
        ...

    def query_rows(self, *args: Any) -> RowCursor:
        """Bind positional arguments and return a cursor over the result rows."""
        ...

    def close(self) -> None:
        """Release the handle. Safe to call more than once."""
        ...


class StatementExecutor(Protocol):
    """Capability surface DrySql needs from a database client."""

    def prepare(self, query: str) -> Statement:
        """Compile query text into a statement handle.

        Raises PrepareError when the text cannot be prepared. Implementations
        without a separate compile step may accept text the store will later
        reject; that rejection surfaces as ExecutionError from exec or
        query_rows, after the facade has already notified its observer.
        """
        ...

    def exec_direct(self, query: str, *args: Any) -> ExecResult:
        """Execute query text without keeping a statement handle."""
        ...

    def query_direct(self, query: str, *args: Any) -> RowCursor:
        """Run query text without keeping a statement handle."""
        ...
