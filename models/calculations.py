"""Helper functions for service due calculations."""

from .constants import DUE_SOON_DISTANCE
from .status import Status


def calc_due_distance(last_service: int, interval: int, current: int) -> int:
    """
    Calculate the odometer reading at which an item next falls due.

    - With history: last_service + interval
    - Without history (last_service == 0): current + interval, so an item
      that was never serviced gets one full interval from now
    """
    if last_service > 0:
        return last_service + interval
    return current + interval


def check_status(remaining: int, soon_threshold: int = DUE_SOON_DISTANCE) -> Status:
    """Determine status from the distance left before the item is due."""
    if remaining < 0:
        return Status.OVERDUE
    if remaining < soon_threshold:
        return Status.DUE_SOON
    return Status.OK
