from typing import List, Sequence

from famcal.engine.types import Occurrence, Viewer


def can_view(occurrence: Occurrence, viewer: Viewer) -> bool:
    """Whether a single occurrence is shown to the viewer."""
    if viewer.is_parent:
        return True
    if viewer.member_id is None:
        return False
    return viewer.member_id in occurrence.assigned_member_ids


def filter_occurrences(occurrences: Sequence[Occurrence], viewer: Viewer) -> List[Occurrence]:
    """
    Restrict occurrences to what the viewer should see.

    Parents see everything. Children see only events assigned to them, and a
    child viewer without a member id sees nothing. This decides UI content
    only; storage queries enforce the actual access rules.
    """
    if viewer.is_parent:
        return list(occurrences)
    return [occurrence for occurrence in occurrences if can_view(occurrence, viewer)]
