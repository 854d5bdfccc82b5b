"""Merge new and edited service records into a vehicle's history."""

import logging
from operator import attrgetter
from typing import Iterable, Tuple

from .service_record import ServiceRecord

logger = logging.getLogger(__name__)


def reconcile(
    history: Iterable[ServiceRecord],
    candidate: ServiceRecord,
    is_edit: bool,
    current_odometer: int = 0,
) -> Tuple[Tuple[ServiceRecord, ...], int]:
    """
    Produce the next history and current odometer after saving a record.

    - Edit: records with the candidate's id are replaced in place. When no
      record matches, the candidate is appended instead.
    - New: the candidate is appended.
    - History is sorted ascending by odometer. The sort is stable, so
      records sharing an odometer keep their relative order.
    - The current odometer never goes down: it becomes the maximum of the
      previous reading and every odometer left in history.

    Neither history nor candidate is modified.
    """
    records = list(history)

    if is_edit:
        matched = False
        for index, record in enumerate(records):
            if record.id == candidate.id:
                records[index] = candidate
                matched = True
        if not matched:
            logger.warning(
                "Edited service %s not found in history, appending it", candidate.id
            )
            records.append(candidate)
    else:
        records.append(candidate)

    records.sort(key=attrgetter("odometer"))

    new_current = max([current_odometer, 0] + [r.odometer for r in records])
    return tuple(records), new_current
