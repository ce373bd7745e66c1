"""
Storage Module Enums

Type definitions for the storage module.
Configuration values live in config/settings.py following the
"ALL config in config/settings.py" principle.

This module contains only Enum types and the fixed names of the
persisted collections.
"""

from enum import Enum

# =============================================================================
# ENUMS
# =============================================================================


class MediaType(Enum):
    """Kind of captured media"""

    PHOTO = "photo"
    VIDEO = "video"


class IntegrityIssueKind(Enum):
    """Inconsistencies reported by the integrity check"""

    ITEM_COUNT_MISMATCH = "item_count_mismatch"  # itemCount != owned items
    ORDER_NOT_CONTIGUOUS = "order_not_contiguous"  # order has gaps/duplicates
    ORPHANED_ITEM = "orphaned_item"  # item references a missing session


# =============================================================================
# COLLECTIONS
# =============================================================================

TABLE_SESSIONS = "sessions"
TABLE_MEDIA_ITEMS = "media_items"
INDEX_MEDIA_SESSION = "idx_media_session"
