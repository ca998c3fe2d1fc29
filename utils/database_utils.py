"""
==================================================
Database connectivity utilities.
==================================================

Provides engine creation from configuration and a lightweight health check,
keeping connection setup out of the facade and the SQL builders.

Example:
    >>> from utils.database_utils import create_sqlalchemy_engine, check_database_available
    >>>
    >>> engine = create_sqlalchemy_engine("sqlite:///app.db")
    >>> if check_database_available(engine):
    ...     print("Database ready")
"""

import logging
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from core.config import config
from core.exceptions import DrySqlError

logger = logging.getLogger(__name__)


class DatabaseConnectionError(DrySqlError):
    """Exception raised when an engine cannot be created."""
    pass


def create_sqlalchemy_engine(
    url: Optional[str] = None,
    echo: Optional[bool] = None,
    pool_pre_ping: Optional[bool] = None,
    **engine_kwargs
) -> Engine:
    """
    Create a SQLAlchemy engine.

    Args:
        url: Database URL (defaults to config.database_url)
        echo: Enable SQL statement logging (defaults to config)
        pool_pre_ping: Verify connections before use (defaults to config)
        **engine_kwargs: Extra keyword arguments for create_engine()

    Returns:
        Configured SQLAlchemy Engine

    Raises:
        DatabaseConnectionError: If the URL is invalid or the dialect is unavailable
    """
    url = url or config.database_url
    options = config.db.get_engine_options()
    if echo is not None:
        options['echo'] = echo
    if pool_pre_ping is not None:
        options['pool_pre_ping'] = pool_pre_ping
    options.update(engine_kwargs)

    try:
        engine = create_engine(url, **options)
    except (SQLAlchemyError, ImportError, ValueError) as e:
        logger.error(f"❌ Failed to create engine: {e}")
        raise DatabaseConnectionError(f"Failed to create engine: {e}")

    logger.debug(f"Created engine for {engine.url.render_as_string(hide_password=True)}")
    return engine


def check_database_available(engine: Engine) -> bool:
    """
    Check if the database behind an engine answers a trivial query.

    Args:
        engine: SQLAlchemy engine to probe

    Returns:
        True if database is available, False otherwise
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError as e:
        logger.debug(f"Database not available: {e}")
        return False
