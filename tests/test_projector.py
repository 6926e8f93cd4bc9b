"""Tests for the view projector."""

import pytest

from journey import Ledger, project
from journey.models import LANDMARK_DAYS
from journey.projector import completion_percentage, scroll_position


@pytest.fixture
def ledger() -> Ledger:
    return Ledger.register("Hana", "hana@example.com")


def test_fresh_journey_view(ledger: Ledger):
    view = ledger.project()
    assert view.completed_count == 0
    assert view.completion_percentage == 0
    assert view.current_day == 1
    assert view.current_day_label == 1
    assert view.focus_activity_id == "day-1"
    assert view.scroll_position == 0
    assert view.character_position == 50
    assert view.character_selection_required is True


@pytest.mark.parametrize("count", range(0, 31))
def test_percentage_is_exact(count: int):
    assert completion_percentage(count) == 100 * count / 30


def test_percentage_is_clamped():
    assert completion_percentage(-3) == 0
    assert completion_percentage(45) == 100


def test_percentage_tracks_ledger(ledger: Ledger):
    for day in range(1, 31):
        ledger.complete_activity(f"day-{day}")
        assert ledger.project().completion_percentage == 100 * day / 30


def test_day_label_caps_at_thirty(ledger: Ledger):
    for day in range(1, 31):
        ledger.complete_activity(f"day-{day}")
    view = ledger.project()
    assert view.current_day_label == 30
    assert view.focus_activity_id is None
    assert view.completion_percentage == 100


def test_landmarks_pair_days_with_activities(ledger: Ledger):
    view = ledger.project()
    assert [lm.day for lm in view.landmarks] == list(LANDMARK_DAYS)
    assert [lm.activity.id for lm in view.landmarks] == [
        "day-5", "day-10", "day-15", "day-20", "day-25",
    ]


def test_scroll_follows_progress(ledger: Ledger):
    for day in (1, 2, 3):
        ledger.complete_activity(f"day-{day}")
    view = ledger.project()
    assert view.scroll_position == scroll_position(3) == 700
    assert view.character_position == 750
    assert view.focus_activity_id == "day-4"


def test_projection_is_pure(ledger: Ledger):
    ledger.complete_activity("day-1")
    record = ledger.snapshot()
    first = project(record)
    second = project(record)
    assert first == second
    assert record == ledger.snapshot()


def test_projection_never_stale(ledger: Ledger):
    before = ledger.project()
    ledger.complete_activity("day-1")
    ledger.select_character("rangi")
    after = ledger.project()
    assert before.completed_count == 0
    assert after.completed_count == 1
    assert after.selected_character_id == "rangi"
    assert after.character_selection_required is False


def test_landmark_copies_are_detached(ledger: Ledger):
    view = ledger.project()
    view.landmarks[0].activity.completed = True
    assert ledger.activity("day-5").completed is False
