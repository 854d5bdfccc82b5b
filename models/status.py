"""Status enum for maintenance urgency tiers."""

from enum import Enum


class Status(Enum):
    """Maintenance urgency tiers. Lower urgency = more urgent."""

    OVERDUE = "overdue"
    DUE_SOON = "due-soon"
    OK = "ok"

    @property
    def urgency(self) -> int:
        return _URGENCY[self]


_URGENCY = {Status.OVERDUE: 1, Status.DUE_SOON: 2, Status.OK: 3}
