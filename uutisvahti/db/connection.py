"""Database connection management."""

import os
from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool


class DatabaseConfig:
    """Database configuration."""

    def __init__(self, config: Dict[str, Any]) -> None:
        """Initialize database config from dict."""
        self.host = config.get("host", "localhost")
        self.port = config.get("port", 5432)
        self.database = config.get("database", "uutisvahti")
        self.user = config.get("user", "uutisvahti")

        # Explicit password wins over the environment variable
        password_env = config.get("password_env")
        self.password = config.get("password") or (
            os.environ.get(password_env, "") if password_env else ""
        )

    @property
    def conninfo(self) -> str:
        """Get psycopg connection string."""
        return make_conninfo(
            host=self.host,
            port=self.port,
            dbname=self.database,
            user=self.user,
            password=self.password,
        )


_connection_pool: Optional[ConnectionPool] = None


def get_connection_pool(config: Dict[str, Any]) -> ConnectionPool:
    """Get or create connection pool."""
    global _connection_pool
    if _connection_pool is None:
        db_config = DatabaseConfig(config)
        _connection_pool = ConnectionPool(
            db_config.conninfo,
            min_size=1,
            max_size=4,
            kwargs={"row_factory": dict_row},
            open=True,
        )
    return _connection_pool


def close_connection_pool() -> None:
    """Close the pool, if one was opened."""
    global _connection_pool
    if _connection_pool is not None:
        _connection_pool.close()
        _connection_pool = None


@contextmanager
def get_connection(
    config: Dict[str, Any], timeout: Optional[float] = None
) -> Generator[psycopg.Connection, None, None]:
    """Get a database connection from the pool.

    ``timeout`` bounds the wait for a connection; None keeps the pool default.
    """
    pool = get_connection_pool(config)
    with pool.connection(timeout=timeout) as conn:
        yield conn
