"""Persistence: SQLite schema and the chunk store."""

from src.storage.chunk_store import ChunkStore
from src.storage.database import get_connection, initialize_database

__all__ = ["ChunkStore", "get_connection", "initialize_database"]
