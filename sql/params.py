"""
================================
Query parameter normalization.
================================

Converts runtime Python values into a form every DB-API driver can bind as a
positional parameter, or reports that the value is absent.

Normalization rules:
    - None is absent
    - SqlValuer objects are asked for their sql_value(), which is normalized again
    - Enum members normalize through their .value
    - bool, float, str, bytes, Decimal, date, time and datetime are bindable
    - int must fit in a signed 64-bit integer
    - bytearray and memoryview are copied to bytes
    - anything else raises ConversionError

Example:
    >>> from sql.params import normalize_value
    >>> normalize_value(None) is None
    True
    >>> normalize_value(bytearray(b"ab"))
    b'ab'
"""

import datetime
import decimal
import enum
from typing import Any, Optional, Protocol, runtime_checkable

from core.exceptions import ConversionError

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_PASSTHROUGH_TYPES = (
    float,
    bytes,
    decimal.Decimal,
    datetime.datetime,
    datetime.date,
    datetime.time,
)


@runtime_checkable
class SqlValuer(Protocol):
    """Value type that knows how to turn itself into a bindable parameter."""

    def sql_value(self) -> Any:
        """Return a bindable value, or None to mark the value absent."""
        ...


def _normalize_plain(value: Any, column: Optional[str]) -> Any:
    if value is None:
        return None

    if isinstance(value, bool):
        return value

    if isinstance(value, enum.Enum):
        return _normalize_plain(value.value, column)

    if isinstance(value, int):
        if not INT64_MIN <= value <= INT64_MAX:
            raise ConversionError(
                f"integer {value} does not fit in a signed 64-bit parameter",
                column=column,
                value_type=type(value).__name__
            )
        return int(value)

    if isinstance(value, str):
        return str.__str__(value)

    if isinstance(value, _PASSTHROUGH_TYPES):
        return value

    if isinstance(value, (bytearray, memoryview)):
        return bytes(value)

    raise ConversionError(
        f"unsupported parameter type {type(value).__name__}"
        + (f" for column '{column}'" if column else ""),
        column=column,
        value_type=type(value).__name__
    )


def normalize_value(value: Any, column: Optional[str] = None) -> Any:
    """
    Normalize a runtime value into a bindable query parameter.

    Args:
        value: Value to normalize
        column: Column tag the value belongs to (used in error messages)

    Returns:
        The bindable value, or None when the value is absent

    Raises:
        ConversionError: If the value cannot be bound
    """
    if isinstance(value, SqlValuer) and not isinstance(value, type):
        try:
            value = value.sql_value()
        except ConversionError:
            raise
        except Exception as e:
            raise ConversionError(
                f"sql_value() failed for {type(value).__name__}: {e}",
                column=column,
                value_type=type(value).__name__
            )
        if isinstance(value, SqlValuer) and not isinstance(value, type):
            raise ConversionError(
                f"sql_value() returned non-bindable type {type(value).__name__}",
                column=column,
                value_type=type(value).__name__
            )

    return _normalize_plain(value, column)


def is_absent(value: Any) -> bool:
    """Return True when a normalized value means 'not provided'."""
    return value is None
