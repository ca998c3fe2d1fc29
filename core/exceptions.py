"""
==============================
Exception hierarchy for drysql.
==============================

Every error raised by the statement executor, the update compiler and the
facade derives from DrySqlError so callers can catch the whole family at once.

Hierarchy:
    DrySqlError
    ├── PrepareError
    ├── ConversionError (also TypeError)
    ├── UnsupportedRecordError (also TypeError)
    ├── MissingRowIdentifierError (also ValueError)
    ├── ExecutionError
    ├── ScanError
    │   └── NoRowsError
    └── DatabaseConnectionError (utils.database_utils)
"""

from typing import Optional


class DrySqlError(Exception):
    """Base class for all drysql exceptions."""


class PrepareError(DrySqlError):
    """Raised when query text cannot be compiled into a statement handle."""


class ConversionError(DrySqlError, TypeError):
    """Raised when a field value cannot be normalized into a bindable parameter.

    Attributes:
        column: Column tag of the offending field, if known
        value_type: Name of the offending Python type
    """

    def __init__(
        self,
        message: str,
        column: Optional[str] = None,
        value_type: Optional[str] = None
    ):
        super().__init__(message)
        self.column = column
        self.value_type = value_type


class UnsupportedRecordError(DrySqlError, TypeError):
    """Raised when a record is neither a tagged dataclass nor a db_fields() provider."""


class MissingRowIdentifierError(DrySqlError, ValueError):
    """Raised when an update has assignments but no value for the row identifier."""


class ExecutionError(DrySqlError):
    """Raised when the underlying store rejects a statement or row iteration fails."""


class ScanError(DrySqlError):
    """Raised when a result row cannot be decoded into the caller's shape."""


class NoRowsError(ScanError):
    """Raised when a single-row fetch produced no rows."""
