"""
=================================
Configuration management for drysql.
=================================

Loads all configuration from environment variables (.env file) and provides
a centralized Config singleton for application-wide access.

Example:
    >>> from core.config import config
    >>>
    >>> # Database URL handed to SQLAlchemy
    >>> url = config.database_url
    >>>
    >>> # Logging settings
    >>> print(f"Level: {config.log_level}, file: {config.log_file}")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)


def _env_flag(name: str, default: str) -> bool:
    """Read a boolean environment variable (1/true/yes/on are truthy)."""
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class DatabaseConfig:
    """Database configuration settings.

    Attributes:
        url: SQLAlchemy database URL
        echo: Echo every SQL statement through SQLAlchemy's logger
        pool_pre_ping: Verify pooled connections before handing them out
    """

    url: str
    echo: bool = False
    pool_pre_ping: bool = True

    def get_engine_options(self) -> dict:
        """Get keyword arguments for sqlalchemy.create_engine().

        Returns:
            Dictionary with keys: echo, pool_pre_ping
        """
        return {
            'echo': self.echo,
            'pool_pre_ping': self.pool_pre_ping
        }


@dataclass
class LoggingConfig:
    """Logging configuration settings.

    Attributes:
        level: Root logging level (DEBUG/INFO/WARNING/ERROR/CRITICAL)
        log_file: Optional log file name; no file handler when unset
        log_dir: Directory the log file is written to
        use_colors: Use colored console output
    """

    level: str = 'INFO'
    log_file: Optional[str] = None
    log_dir: str = 'logs'
    use_colors: bool = True


class Config:
    """Centralized configuration manager.

    Attributes:
        db: DatabaseConfig instance with database connection settings
        logging: LoggingConfig instance with logging settings

    Example:
        >>> config = Config()
        >>> engine = create_engine(config.database_url, **config.db.get_engine_options())
    """

    def __init__(self):
        """Initialize configuration from environment variables."""
        self.db = DatabaseConfig(
            url=os.getenv('DRYSQL_DATABASE_URL', 'sqlite:///drysql.db'),
            echo=_env_flag('DRYSQL_ECHO_SQL', 'false'),
            pool_pre_ping=_env_flag('DRYSQL_POOL_PRE_PING', 'true')
        )

        self.logging = LoggingConfig(
            level=os.getenv('DRYSQL_LOG_LEVEL', 'INFO'),
            log_file=os.getenv('DRYSQL_LOG_FILE') or None,
            log_dir=os.getenv('DRYSQL_LOG_DIR', 'logs'),
            use_colors=_env_flag('DRYSQL_LOG_COLORS', 'true')
        )

    @property
    def database_url(self) -> str:
        """Get SQLAlchemy database URL."""
        return self.db.url

    @property
    def echo_sql(self) -> bool:
        """Get SQL echo flag."""
        return self.db.echo

    @property
    def log_level(self) -> str:
        """Get root logging level."""
        return self.logging.level

    @property
    def log_file(self) -> Optional[str]:
        """Get log file name, if any."""
        return self.logging.log_file


# Global configuration instance
config = Config()
