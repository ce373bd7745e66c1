"""
Integrity Utilities

Pure functions that check the Sessions/MediaItems collections against
their invariants. Shared by LocalStorage and MockStorage so both report
identical results.
"""

from collections import defaultdict
from typing import Dict, Iterable, List

from storage.constants import IntegrityIssueKind
from storage.models.integrity import IntegrityIssue, IntegrityReport
from storage.models.media_item import MediaItem
from storage.models.session import Session


def sort_for_session(items: Iterable[MediaItem]) -> List[MediaItem]:
    """Sort by order, then created_at (fallback for equal orders)"""
    return sorted(items, key=lambda item: (item.order, item.created_at))


def check_integrity(
    sessions: Iterable[Session],
    items: Iterable[MediaItem],
) -> IntegrityReport:
    """
    Compare every session's aggregate metadata with its media items.

    Checks:
    1. item_count equals the number of owned items
    2. orders are exactly {0, ..., n-1}
    3. every item references an existing session

    Args:
        sessions: All stored sessions
        items: All stored media items

    Returns:
        IntegrityReport (repaired=False)
    """
    sessions = list(sessions)
    items = list(items)
    report = IntegrityReport(
        sessions_checked=len(sessions),
        items_checked=len(items),
    )

    by_session: Dict[str, List[MediaItem]] = defaultdict(list)
    for item in items:
        by_session[item.session_id].append(item)

    known_ids = {session.id for session in sessions}

    for session in sessions:
        owned = by_session.get(session.id, [])

        if session.item_count != len(owned):
            report.issues.append(
                IntegrityIssue(
                    kind=IntegrityIssueKind.ITEM_COUNT_MISMATCH,
                    session_id=session.id,
                    detail=(
                        f"item_count={session.item_count} "
                        f"but {len(owned)} items stored"
                    ),
                ),
            )

        orders = sorted(item.order for item in owned)
        if orders != list(range(len(owned))):
            report.issues.append(
                IntegrityIssue(
                    kind=IntegrityIssueKind.ORDER_NOT_CONTIGUOUS,
                    session_id=session.id,
                    detail=f"orders={orders}",
                ),
            )

    for session_id, owned in by_session.items():
        if session_id in known_ids:
            continue
        for item in owned:
            report.issues.append(
                IntegrityIssue(
                    kind=IntegrityIssueKind.ORPHANED_ITEM,
                    session_id=session_id,
                    detail="session does not exist",
                    media_id=item.id,
                ),
            )

    return report


def renumber(items: Iterable[MediaItem]) -> Dict[str, int]:
    """
    Compute gap-free orders for one session's items.

    Returns:
        Mapping media_id -> new order (only entries that change)
    """
    changes = {}
    for index, item in enumerate(sort_for_session(items)):
        if item.order != index:
            changes[item.id] = index
    return changes
