"""
==========================
Utility Functions Package.
==========================

Reusable helpers for database connectivity.

Modules:
    database_utils: Engine creation and health checks
"""

__version__ = "0.1.0"
__all__ = [
    'DatabaseConnectionError',
    'check_database_available',
    'create_sqlalchemy_engine',
]

from .database_utils import (
    DatabaseConnectionError,
    check_database_available,
    create_sqlalchemy_engine,
)
