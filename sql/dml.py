"""
===========================================
Data Manipulation Language (DML) Utilities.
===========================================

This module compiles partially-populated tagged records into parameterized
UPDATE statements. Only fields the caller actually set are written; the
row-identifier field is routed into the WHERE clause.

Functions:
- update_builder: Assemble UPDATE text from ordered assignment pairs
- compile_update: Compile a tagged record into an UpdatePlan

Usage:
    from sql.dml import compile_update

    plan = compile_update('users', 'user_id', UserUpdate(user_id=7, first_name='Ann'))
    plan.query  # UPDATE users SET first_name = ? WHERE user_id = ?
    plan.args   # ['Ann', 7]
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from core.exceptions import MissingRowIdentifierError
from sql.params import is_absent
from sql.records import iter_field_descriptors

logger = logging.getLogger(__name__)

PLACEHOLDER = '?'

_UNSET = object()


@dataclass(frozen=True)
class UpdatePlan:
    """
    Compiled UPDATE statement.

    Attributes:
        table: Target table name
        identifier_column: Column naming the row key
        assignments: Ordered (column, placeholder) pairs for the SET clause
        assignment_values: Normalized values bound to the SET placeholders
        identifier_value: Normalized value bound to the WHERE placeholder
        extra_filter: Optional raw SQL condition appended with AND
    """

    table: str
    identifier_column: str
    assignments: Tuple[Tuple[str, str], ...]
    assignment_values: Tuple[Any, ...]
    identifier_value: Any
    extra_filter: str = ''

    @property
    def query(self) -> str:
        """Parameterized UPDATE text."""
        return update_builder(
            table=self.table,
            assignments=self.assignments,
            identifier_column=self.identifier_column,
            extra_filter=self.extra_filter
        )

    @property
    def args(self) -> List[Any]:
        """Positional arguments; the identifier value binds the last placeholder."""
        return [*self.assignment_values, self.identifier_value]


def update_builder(
    table: str,
    assignments: Sequence[Tuple[str, str]],
    identifier_column: str,
    extra_filter: str = ''
) -> str:
    """
    Build an UPDATE statement from ordered assignment pairs.

    Args:
        table: Table name
        assignments: Ordered (column, placeholder) pairs
        identifier_column: Column used in the WHERE clause
        extra_filter: Optional SQL boolean expression appended with AND

    Returns:
        SQL UPDATE statement
    """
    set_clause = ", ".join(f"{col} = {placeholder}" for col, placeholder in assignments)

    sql = f"UPDATE {table} SET {set_clause} WHERE {identifier_column} = {PLACEHOLDER}"

    if extra_filter:
        sql += f" AND {extra_filter}"

    return sql


def compile_update(
    table: str,
    identifier_column: str,
    record: Any,
    extra_filter: str = ''
) -> Optional[UpdatePlan]:
    """
    Compile a tagged record into an UPDATE plan.

    Fields are visited in declaration order. Untagged fields and fields whose
    normalized value is absent are skipped. Fields tagged with the identifier
    column (compared ignoring case) never become assignments; the first one
    with a present value supplies the WHERE value.

    Args:
        table: Target table name
        identifier_column: Column naming the row key
        record: Tagged record (see sql.records)
        extra_filter: Optional SQL boolean expression appended with AND

    Returns:
        UpdatePlan, or None when there is nothing to update

    Raises:
        ValueError: If table or identifier_column is empty
        UnsupportedRecordError: If record is not a tagged record
        ConversionError: If a field value cannot be bound
        MissingRowIdentifierError: If there are assignments but no identifier value
    """
    if not table:
        raise ValueError("table name must not be empty")
    if not identifier_column:
        raise ValueError("identifier column must not be empty")

    assignments: List[Tuple[str, str]] = []
    values: List[Any] = []
    identifier_value = _UNSET

    for descriptor in iter_field_descriptors(record, identifier_column):
        if is_absent(descriptor.value):
            continue

        if descriptor.is_identifier:
            if identifier_value is _UNSET:
                identifier_value = descriptor.value
            continue

        assignments.append((descriptor.column, PLACEHOLDER))
        values.append(descriptor.value)

    if not assignments:
        logger.debug(f"Nothing to update in {table}: no populated fields")
        return None

    if identifier_value is _UNSET:
        raise MissingRowIdentifierError(
            f"Cannot update {table}: no value for row identifier '{identifier_column}'"
        )

    plan = UpdatePlan(
        table=table,
        identifier_column=identifier_column,
        assignments=tuple(assignments),
        assignment_values=tuple(values),
        identifier_value=identifier_value,
        extra_filter=extra_filter or ''
    )
    logger.debug(f"Compiled update for {table}: {len(assignments)} column(s)")
    return plan
