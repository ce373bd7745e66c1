"""
Storage Interfaces Package
"""

from storage.interfaces.storage_interface import (
    NotFoundError,
    StorageError,
    StorageFailure,
    StorageInterface,
    ValidationError,
)

__all__ = [
    "NotFoundError",
    "StorageError",
    "StorageFailure",
    "StorageInterface",
    "ValidationError",
]
