"""
Storage Module

Persistent session/media store for the session camera.

Architecture:
- interfaces/: Abstract base classes (contracts) and error taxonomy
- implementations/: Concrete implementations (SQLite and mock)
- controllers/: High-level coordination
- managers/: Low-level SQL row access
- models/: Data structures
- utils/: Validation, integrity and naming helpers
"""

# ============================================================================
# storage/__init__.py - Main Package Exports
# ============================================================================

from storage.config import StorageConfig
from storage.constants import IntegrityIssueKind, MediaType
from storage.controllers.storage_controller import StorageController
from storage.factory import StorageFactory, create_storage
from storage.interfaces.storage_interface import (
    NotFoundError,
    StorageError,
    StorageFailure,
    StorageInterface,
    ValidationError,
)
from storage.models.integrity import IntegrityIssue, IntegrityReport
from storage.models.media_item import CropRect, MediaItem
from storage.models.session import Session

# Public API - what users import
__all__ = [
    "CropRect",
    "IntegrityIssue",
    "IntegrityIssueKind",
    "IntegrityReport",
    "MediaItem",
    # Enums
    "MediaType",
    # Errors
    "NotFoundError",
    # Models
    "Session",
    # Main controller (primary API)
    "StorageConfig",
    "StorageController",
    "StorageError",
    "StorageFactory",
    "StorageFailure",
    # Interfaces
    "StorageInterface",
    "ValidationError",
    "create_storage",
]
