"""Persistence backends for the progress record."""

from .backends import (
    FileStorage,
    MemoryStorage,
    SqlStorage,
    StorageBackend,
    create_backend,
)

__all__ = [
    "FileStorage",
    "MemoryStorage",
    "SqlStorage",
    "StorageBackend",
    "create_backend",
]
