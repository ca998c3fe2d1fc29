"""
==========================================
SQL read/write operation observers.
==========================================

Lightweight counters for the volume of SQL reads and writes issued through
the DrySql facade. An observer is handed to DrySql at construction time; when
none is given, NullSqlObserver is used and observing costs nothing.

Classes:
    SqlObserver: Protocol every observer satisfies
    NullSqlObserver: Default observer that ignores every call
    SqlOperationCounter: Thread-safe read/write counters
    LoggingSqlObserver: Observer that logs each operation at DEBUG level

Example:
    >>> from logs.sql_observer import SqlOperationCounter
    >>> from executor.drysql import DrySql
    >>>
    >>> counter = SqlOperationCounter()
    >>> db = DrySql(executor, observer=counter)
    >>> db.prepared_exec("DELETE FROM sessions WHERE expired = ?", [1])
    >>> counter.snapshot()
    {'reads': 0, 'writes': 1}
"""

import logging
import threading
from typing import Dict, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class SqlObserver(Protocol):
    """Receives one notification per prepared read or write."""

    def record_read(self) -> None:
        """Record one read operation."""
        ...

    def record_write(self) -> None:
        """Record one write operation."""
        ...


class NullSqlObserver:
    """Observer that does nothing."""

    def record_read(self) -> None:
        pass

    def record_write(self) -> None:
        pass


class SqlOperationCounter:
    """Thread-safe counters of SQL reads and writes.

    Many in-flight operations may report at once, so every update and read of
    the counters happens under a lock.

    Example:
        >>> counter = SqlOperationCounter()
        >>> counter.record_read()
        >>> counter.reads
        1
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._reads = 0
        self._writes = 0

    def record_read(self) -> None:
        with self._lock:
            self._reads += 1

    def record_write(self) -> None:
        with self._lock:
            self._writes += 1

    @property
    def reads(self) -> int:
        """Number of reads recorded so far."""
        with self._lock:
            return self._reads

    @property
    def writes(self) -> int:
        """Number of writes recorded so far."""
        with self._lock:
            return self._writes

    def snapshot(self) -> Dict[str, int]:
        """Return both counters read atomically."""
        with self._lock:
            return {'reads': self._reads, 'writes': self._writes}

    def reset(self) -> Dict[str, int]:
        """Zero both counters and return the values they held."""
        with self._lock:
            previous = {'reads': self._reads, 'writes': self._writes}
            self._reads = 0
            self._writes = 0
        logger.debug(f"SQL operation counters reset (was {previous})")
        return previous


class LoggingSqlObserver:
    """Observer that emits a DEBUG record per operation."""

    def __init__(self, name: str = __name__):
        self._logger = logging.getLogger(name)

    def record_read(self) -> None:
        self._logger.debug("SQL read")

    def record_write(self) -> None:
        self._logger.debug("SQL write")
