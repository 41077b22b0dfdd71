import logging
from datetime import datetime
from typing import Dict, List

from dateutil.relativedelta import relativedelta

from famcal.core.metrics import OCCURRENCE_CAP_HITS_TOTAL, UNKNOWN_RULES_TOTAL
from famcal.engine.intervals import overlaps, is_within_interval
from famcal.engine.types import BaseEvent, Occurrence, RecurrenceRule

logger = logging.getLogger(__name__)

# Safety bound on recurrence steps walked per event per call
MAX_OCCURRENCES = 100

# One recurrence step per rule; instances are anchor + step * k
RULE_STEPS: Dict[RecurrenceRule, relativedelta] = {
    RecurrenceRule.DAILY: relativedelta(days=1),
    RecurrenceRule.WEEKLY: relativedelta(weeks=1),
    RecurrenceRule.BIWEEKLY: relativedelta(weeks=2),
    RecurrenceRule.MONTHLY: relativedelta(months=1),
}


class MalformedEventError(ValueError):
    """Raised when a base event does not end after it starts."""
    def __init__(self, event: BaseEvent):
        self.event = event
        super().__init__(
            f"Event {event.id} ends at {event.end_time.isoformat()} "
            f"which is not after its start {event.start_time.isoformat()}"
        )


def resolve_step(event: BaseEvent) -> relativedelta:
    """Return the step for the event's rule, falling back to weekly for unknown values."""
    try:
        rule = RecurrenceRule(event.recurrence_rule)
    except ValueError:
        rule = None

    step = RULE_STEPS.get(rule)
    if step is None:
        UNKNOWN_RULES_TOTAL.inc()
        logger.warning(
            "Unrecognized recurrence rule, falling back to weekly",
            extra={"event_id": event.id, "recurrence_rule": event.recurrence_rule}
        )
        return RULE_STEPS[RecurrenceRule.WEEKLY]
    return step


def generate(
    event: BaseEvent,
    window_start: datetime,
    window_end: datetime,
    limit: int = MAX_OCCURRENCES
) -> List[Occurrence]:
    """
    Expand one base event into the occurrences that fall inside a window.

    Non-recurring events produce at most one occurrence, kept when the event
    overlaps the window at all. Recurring events are walked step by step from
    their original start; the k-th instance is computed from the anchor
    (``start + step * k``) so monthly instances clamp to short months without
    drifting: Jan 31 gives Feb 29, Mar 31, Apr 30 and so on.

    The walk stops once an instance starts after ``window_end`` or ``limit``
    steps have been taken, whichever comes first. Steps before the window count
    towards the limit, so events anchored far in the past are truncated.
    """
    if event.end_time <= event.start_time:
        raise MalformedEventError(event)
    if window_start > window_end:
        return []

    if not event.repeats:
        if overlaps(event.start_time, event.end_time, window_start, window_end):
            return [Occurrence(
                event=event,
                sequence_index=0,
                start_time=event.start_time,
                end_time=event.end_time
            )]
        return []

    step = resolve_step(event)
    duration = event.duration
    occurrences: List[Occurrence] = []

    index = 0
    while index < limit:
        start = event.start_time + step * index
        if start > window_end:
            break
        if is_within_interval(start, window_start, window_end):
            occurrences.append(Occurrence(
                event=event,
                sequence_index=index,
                start_time=start,
                end_time=start + duration
            ))
        index += 1
    else:
        OCCURRENCE_CAP_HITS_TOTAL.inc()
        logger.debug(
            "Occurrence cap reached",
            extra={"event_id": event.id, "limit": limit}
        )

    return occurrences
