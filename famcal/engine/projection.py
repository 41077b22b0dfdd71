import logging
from datetime import datetime
from typing import Iterable, List

from famcal.core.metrics import MALFORMED_EVENTS_SKIPPED_TOTAL, OCCURRENCES_PROJECTED_TOTAL
from famcal.engine.intervals import is_within_interval
from famcal.engine.recurrence import MAX_OCCURRENCES, MalformedEventError, generate
from famcal.engine.types import BaseEvent, Occurrence

logger = logging.getLogger(__name__)


def project(
    events: Iterable[BaseEvent],
    window_start: datetime,
    window_end: datetime,
    limit: int = MAX_OCCURRENCES
) -> List[Occurrence]:
    """
    Project base events onto a window.

    Returns every occurrence whose start lies in ``[window_start, window_end]``,
    sorted by start time. Ties keep the order of ``events``. Events that end
    before they start are skipped with a warning.
    """
    if window_start > window_end:
        return []

    projected: List[Occurrence] = []
    for event in events:
        try:
            occurrences = generate(event, window_start, window_end, limit=limit)
        except MalformedEventError as e:
            MALFORMED_EVENTS_SKIPPED_TOTAL.inc()
            logger.warning(
                "Skipping malformed event",
                extra={"event_id": event.id, "error": str(e)}
            )
            continue

        # The start-time clamp here is authoritative at window edges
        projected.extend(
            occurrence for occurrence in occurrences
            if is_within_interval(occurrence.start_time, window_start, window_end)
        )

    # list.sort is stable, so equal starts keep their input order
    projected.sort(key=lambda occurrence: occurrence.start_time)
    OCCURRENCES_PROJECTED_TOTAL.inc(len(projected))
    return projected
