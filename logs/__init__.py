"""
=====================================
Operation monitoring for drysql.
=====================================

This package provides the observers the DrySql facade notifies on every
prepared read and write.

Modules:
    sql_observer: SqlObserver protocol and its implementations

Components:
    SqlObserver: Protocol with record_read() and record_write()
    NullSqlObserver: No-op default
    SqlOperationCounter: Thread-safe read/write counters
    LoggingSqlObserver: DEBUG log line per operation

Example:
    >>> from logs.sql_observer import SqlOperationCounter
    >>>
    >>> counter = SqlOperationCounter()
    >>> counter.record_write()
    >>> counter.snapshot()
    {'reads': 0, 'writes': 1}
"""

__version__ = "0.1.0"
__all__ = [
    'SqlObserver', 'NullSqlObserver',
    'SqlOperationCounter', 'LoggingSqlObserver'
]

from .sql_observer import (
    LoggingSqlObserver,
    NullSqlObserver,
    SqlObserver,
    SqlOperationCounter,
)
