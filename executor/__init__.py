"""
=========================================
Statement execution package for drysql.
=========================================

Modules:
    interfaces: StatementExecutor, Statement and RowCursor protocols, ExecResult
    sqlalchemy_executor: StatementExecutor over a SQLAlchemy Engine or Connection
    drysql: DrySql facade (prepared exec/query helpers and record updates)

Example:
    >>> from executor import DrySql
    >>>
    >>> db = DrySql.from_url("sqlite:///app.db")
    >>> row = db.query_row("SELECT first_name FROM users WHERE user_id = ?", [7])
"""

__version__ = "0.1.0"
__all__ = [
    'DrySql', 'ExecResult',
    'RowCursor', 'Statement', 'StatementExecutor',
    'SQLAlchemyStatementExecutor'
]

from .drysql import DrySql
from .interfaces import ExecResult, RowCursor, Statement, StatementExecutor
from .sqlalchemy_executor import SQLAlchemyStatementExecutor
