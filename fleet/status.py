"""Status enum for maintenance urgency levels."""

from enum import Enum


class Status(Enum):
    """Service status tiers. Lower value = more urgent."""

    OVERDUE = 1
    WARNING = 2
    OK = 3

    @property
    def label(self) -> str:
        """Lowercase name used in JSON payloads ('ok', 'warning', 'overdue')."""
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "Status":
        return cls[label.upper()]


def worst_status(*statuses: Status) -> Status:
    """Most urgent of the given statuses, OK when none are given."""
    if not statuses:
        return Status.OK
    return min(statuses, key=lambda s: s.value)
