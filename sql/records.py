"""
=======================================
Tagged record descriptions for updates.
=======================================

A tagged record maps its fields to destination column names. Two shapes are
accepted:

- Dataclass instances whose fields carry a "db" metadata entry. The column()
  helper builds such fields with a default of None, so every field is optional
  and unset fields stay absent.
- Any object implementing TaggedRecord.db_fields(), yielding ordered
  (column, value) pairs.

Fields without a column tag are invisible: they are never normalized and
never reach the generated SQL.

Example:
    >>> from dataclasses import dataclass
    >>> from typing import Optional
    >>> from sql.records import column, iter_field_descriptors
    >>>
    >>> @dataclass
    ... class UserUpdate:
    ...     user_id: int = column('user_id')
    ...     first_name: Optional[str] = column('first_name')
    ...     last_name: Optional[str] = column('last_name')
    >>>
    >>> list(iter_field_descriptors(UserUpdate(user_id=7, first_name='Ann'), 'user_id'))
    [FieldDescriptor(column='user_id', value=7, is_identifier=True),
     FieldDescriptor(column='first_name', value='Ann', is_identifier=False),
     FieldDescriptor(column='last_name', value=None, is_identifier=False)]
"""

import dataclasses
from typing import Any, Iterable, Iterator, NamedTuple, Protocol, Tuple, runtime_checkable

from core.exceptions import UnsupportedRecordError
from sql.params import normalize_value

COLUMN_TAG = 'db'


class FieldDescriptor(NamedTuple):
    """One tagged field of a record, with its normalized value."""

    column: str
    value: Any
    is_identifier: bool


@runtime_checkable
class TaggedRecord(Protocol):
    """Record type that declares its own column mapping."""

    def db_fields(self) -> Iterable[Tuple[str, Any]]:
        """Yield (column, value) pairs in declaration order."""
        ...


def column(name: str, default: Any = None, **field_kwargs) -> Any:
    """
    Declare a dataclass field mapped to a database column.

    Args:
        name: Destination column name
        default: Field default (None means 'not provided')
        **field_kwargs: Extra keyword arguments for dataclasses.field()

    Returns:
        A dataclasses.field() carrying the column tag in its metadata
    """
    metadata = dict(field_kwargs.pop('metadata', None) or {})
    metadata[COLUMN_TAG] = name
    if 'default_factory' in field_kwargs:
        return dataclasses.field(metadata=metadata, **field_kwargs)
    return dataclasses.field(default=default, metadata=metadata, **field_kwargs)


def same_column(tag: str, other: str) -> bool:
    """Compare two column names ignoring case."""
    return tag.casefold() == other.casefold()


def iter_tagged_fields(record: Any) -> Iterator[Tuple[str, Any]]:
    """
    Yield (column, raw value) pairs for every tagged field of a record.

    Untagged fields and fields with an empty tag are skipped.

    Raises:
        UnsupportedRecordError: If the record is not a tagged record
    """
    if dataclasses.is_dataclass(record) and not isinstance(record, type):
        for field in dataclasses.fields(record):
            tag = field.metadata.get(COLUMN_TAG)
            if tag:
                yield tag, getattr(record, field.name)
        return

    if isinstance(record, TaggedRecord) and not isinstance(record, type):
        for tag, value in record.db_fields():
            if tag:
                yield tag, value
        return

    raise UnsupportedRecordError(
        f"{type(record).__name__} is not a tagged record; use a dataclass with "
        f"column() fields or implement db_fields()"
    )


def iter_field_descriptors(record: Any, identifier_column: str) -> Iterator[FieldDescriptor]:
    """
    Yield a FieldDescriptor for every tagged field of a record.

    Values are normalized as they are produced, so a ConversionError surfaces
    at the offending field and stops the iteration.

    Args:
        record: Tagged record (dataclass instance or TaggedRecord)
        identifier_column: Column naming the row key, compared ignoring case
    """
    for tag, raw_value in iter_tagged_fields(record):
        yield FieldDescriptor(
            column=tag,
            value=normalize_value(raw_value, column=tag),
            is_identifier=same_column(tag, identifier_column)
        )
