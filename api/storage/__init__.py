"""
Persistence gateway: the `Storage` capability and its PostgreSQL implementation.
"""

from .interfaces import Storage
from .postgres import PostgresStorage

__all__ = ["Storage", "PostgresStorage"]
