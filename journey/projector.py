"""Pure view derivation for the journey map.

project() reads a ledger record and returns a fresh Projection. It never
mutates its input and keeps no cache, so calling it after every command
always reflects the ledger's current state.
"""

from __future__ import annotations

from journey.models import JOURNEY_LENGTH, LANDMARK_DAYS, Landmark, LedgerRecord, Projection
from journey.roster import STOP_SPACING


def completion_percentage(completed_count: int) -> float:
    return min(100.0, max(0.0, 100 * completed_count / JOURNEY_LENGTH))


def scroll_position(completed_count: int) -> int:
    """Left offset that keeps the next stop in view."""
    return max(0, completed_count * STOP_SPACING - 200)


def project(record: LedgerRecord) -> Projection:
    completed = sum(1 for a in record.activities if a.completed)
    by_day = {a.day: a for a in record.activities}
    landmarks = [
        Landmark(day=day, activity=by_day[day].model_copy(deep=True))
        for day in LANDMARK_DAYS
        if day in by_day
    ]
    focus = next(
        (a.id for a in record.activities if a.unlocked and not a.completed), None
    )
    scroll = scroll_position(completed)
    return Projection(
        completed_count=completed,
        completion_percentage=completion_percentage(completed),
        current_day=record.current_day,
        current_day_label=min(completed + 1, JOURNEY_LENGTH),
        landmarks=landmarks,
        scroll_position=scroll,
        character_position=scroll + 50,
        focus_activity_id=focus,
        selected_character_id=record.selected_character_id,
        character_selection_required=record.character_selection_required,
    )
