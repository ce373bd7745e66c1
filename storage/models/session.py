"""
Session Model

A named, timestamped container owning an ordered set of media items.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class Session:
    """
    Represents a recording session and its aggregate metadata.

    Records are immutable values. Every mutation produces a new Session
    through next_version(), which only the storage write path calls.
    """

    id: str
    name: str
    created_at: datetime
    last_modified: datetime
    item_count: int = 0

    def next_version(
        self,
        now: datetime,
        item_delta: int = 0,
    ) -> "Session":
        """
        Build the successor of this record after a mutation.

        last_modified strictly increases, even when two writes land on
        the same clock tick.

        Args:
            now: Current time
            item_delta: Change to item_count (+1 for an add, 0 for an edit)

        Returns:
            New Session value
        """
        return replace(
            self,
            last_modified=next_timestamp(self.last_modified, now),
            item_count=self.item_count + item_delta,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for database storage"""
        return {
            "id": self.id,
            "name": self.name,
            "created_at": format_timestamp(self.created_at),
            "last_modified": format_timestamp(self.last_modified),
            "item_count": self.item_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        """Create Session from dictionary (database row)"""
        return cls(
            id=data["id"],
            name=data["name"],
            created_at=datetime.fromisoformat(data["created_at"]),
            last_modified=datetime.fromisoformat(data["last_modified"]),
            item_count=data.get("item_count", 0),
        )

    def __repr__(self) -> str:
        return (
            f"Session(name='{self.name}', items={self.item_count}, "
            f"modified={format_timestamp(self.last_modified)})"
        )


def next_timestamp(previous: Optional[datetime], now: datetime) -> datetime:
    """Return now, or previous + 1µs if the clock has not moved past previous"""
    if previous is not None and now <= previous:
        return previous + timedelta(microseconds=1)
    return now


def format_timestamp(value: datetime) -> str:
    """
    ISO format with fixed microsecond precision.

    datetime.isoformat() drops the fraction when it is zero, which would
    break lexical ordering of the stored strings.
    """
    return value.isoformat(timespec="microseconds")
