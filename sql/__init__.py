"""
=========================================
SQL construction package for drysql.
=========================================

This package turns tagged records into parameterized SQL. All functions are
pure: they build query text and argument lists but never touch a database.

The package is organized as:
    - params.py: Runtime value normalization into bindable parameters
    - records.py: Tagged record descriptions and field descriptors
    - dml.py: UPDATE compilation (compile_update, update_builder)

Example:
    >>> from dataclasses import dataclass
    >>> from typing import Optional
    >>> from sql import column, compile_update
    >>>
    >>> @dataclass
    ... class UserUpdate:
    ...     user_id: int = column('user_id')
    ...     first_name: Optional[str] = column('first_name')
    >>>
    >>> plan = compile_update('users', 'user_id', UserUpdate(user_id=7, first_name='Ann'))
    >>> plan.query
    'UPDATE users SET first_name = ? WHERE user_id = ?'
"""

__version__ = "0.1.0"
__all__ = [
    # Parameters
    'normalize_value', 'SqlValuer',
    # Records
    'column', 'FieldDescriptor', 'TaggedRecord', 'iter_field_descriptors',
    # DML
    'compile_update', 'update_builder', 'UpdatePlan'
]

from .dml import UpdatePlan, compile_update, update_builder
from .params import SqlValuer, normalize_value
from .records import FieldDescriptor, TaggedRecord, column, iter_field_descriptors
