"""SQLite storage layer for price history."""

from .connection import get_connection, init_db

__all__ = ["get_connection", "init_db"]
