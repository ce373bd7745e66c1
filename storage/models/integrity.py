"""
Integrity Report Models

Results of checking the Sessions/MediaItems collections against their
invariants (item counts, gap-free ordering, no orphans).
"""

from dataclasses import dataclass, field
from typing import List, Optional

from storage.constants import IntegrityIssueKind


@dataclass(frozen=True)
class IntegrityIssue:
    """A single invariant violation"""

    kind: IntegrityIssueKind
    session_id: str
    detail: str
    media_id: Optional[str] = None

    def __str__(self) -> str:
        return f"[{self.kind.value}] session={self.session_id}: {self.detail}"


@dataclass
class IntegrityReport:
    """Outcome of verify_integrity()/repair_integrity()"""

    sessions_checked: int = 0
    items_checked: int = 0
    issues: List[IntegrityIssue] = field(default_factory=list)
    repaired: bool = False

    @property
    def is_consistent(self) -> bool:
        return not self.issues

    def count(self, kind: IntegrityIssueKind) -> int:
        return sum(1 for issue in self.issues if issue.kind == kind)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/display"""
        return {
            "sessions_checked": self.sessions_checked,
            "items_checked": self.items_checked,
            "issues": len(self.issues),
            "item_count_mismatches": self.count(
                IntegrityIssueKind.ITEM_COUNT_MISMATCH,
            ),
            "order_problems": self.count(IntegrityIssueKind.ORDER_NOT_CONTIGUOUS),
            "orphaned_items": self.count(IntegrityIssueKind.ORPHANED_ITEM),
            "repaired": self.repaired,
        }
