"""Database access for Uutisvahti."""

from .articles import ArticleStorage
from .connection import close_connection_pool, get_connection, get_connection_pool
from .init import init_database, validate_connection
from .runs import RunManager
from .sources import SourceManager

__all__ = [
    "ArticleStorage",
    "RunManager",
    "SourceManager",
    "close_connection_pool",
    "get_connection",
    "get_connection_pool",
    "init_database",
    "validate_connection",
]
