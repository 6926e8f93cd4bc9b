"""Create a demo journey for development/testing."""

import shutil

from journey import Achievement, Ledger, Roster, Storage

DEMO_LEARNER = {"name": "Hana", "email": "hana@example.com", "difficulty": "intermediate"}
DEMO_COMPLETED_DAYS = 6


def create_demo_data(storage: Storage) -> Ledger:
    """Wipe stored journeys and create one learner part-way through the map."""
    journeys_dir = storage.base_path / "journeys"
    if journeys_dir.exists():
        shutil.rmtree(journeys_dir)
    journeys_dir.mkdir(parents=True, exist_ok=True)

    config = storage.get_config()
    ledger = Ledger.register(
        DEMO_LEARNER["name"],
        DEMO_LEARNER["email"],
        DEMO_LEARNER["difficulty"],
        roster=Roster(seed=config["roster_seed"]),
    )
    ledger.select_character("aroha")
    for day in range(1, DEMO_COMPLETED_DAYS + 1):
        ledger.complete_activity(f"day-{day}")
    # Six completions are enough for the ocean guardian
    ledger.select_character("moana")
    ledger.add_achievement(
        Achievement(
            id="first-steps",
            title="First Steps",
            description="Completed the first activity",
            icon="👣",
        )
    )
    storage.save_ledger(ledger)
    return ledger
