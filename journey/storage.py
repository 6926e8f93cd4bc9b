"""JSON file storage for learner ledgers and app settings.

All state is stored in flat JSON files under a configurable base directory.
Reads and writes are explicit: callers save a ledger after each successful
command and load it again at the start of the next session.

Directory layout:

    {base}/
      config.json             ← app settings merged over defaults
      journeys/
        {user_id}.json        ← one versioned ledger record per learner
"""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from journey.ledger import Ledger

logger = logging.getLogger(__name__)

CONFIG_DEFAULTS: dict[str, Any] = {
    "roster_seed": 0,
    "default_difficulty": "beginner",
    "calendar_unlocks": False,
    "verification_ttl_minutes": 30,
}


class Storage:
    def __init__(self, base_path: Path) -> None:
        self._base = base_path
        self._journeys = base_path / "journeys"
        self._journeys.mkdir(parents=True, exist_ok=True)

    @property
    def base_path(self) -> Path:
        return self._base

    # ------------------------------------------------------------------
    # Internal path helpers
    # ------------------------------------------------------------------

    def _ledger_file(self, user_id: str) -> Path:
        return self._journeys / f"{user_id}.json"

    def _config_file(self) -> Path:
        return self._base / "config.json"

    # ------------------------------------------------------------------
    # Ledgers
    # ------------------------------------------------------------------

    def save_ledger(self, ledger: Ledger) -> None:
        """Write the ledger record, replacing any previous one atomically."""
        path = self._ledger_file(ledger.user_id)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(ledger.to_json(), encoding="utf-8")
        tmp.replace(path)

    def load_ledger(self, user_id: str) -> Ledger | None:
        """Rehydrate a ledger. Raises CorruptStateError for invalid records."""
        path = self._ledger_file(user_id)
        if not path.is_file():
            return None
        return Ledger.from_json(path.read_text(encoding="utf-8"))

    def list_ledgers(self) -> list[str]:
        return sorted(p.stem for p in self._journeys.glob("*.json"))

    def delete_ledger(self, user_id: str) -> bool:
        path = self._ledger_file(user_id)
        if not path.is_file():
            return False
        path.unlink()
        logger.info(f"Deleted journey {user_id}")
        return True

    # ------------------------------------------------------------------
    # Config
    # ------------------------------------------------------------------

    def get_config(self) -> dict[str, Any]:
        """Read config, returning defaults merged with stored values."""
        config = copy.deepcopy(CONFIG_DEFAULTS)
        path = self._config_file()
        if path.is_file():
            stored = json.loads(path.read_text(encoding="utf-8"))
            for key in CONFIG_DEFAULTS:
                if key in stored:
                    config[key] = stored[key]
        return config

    def update_config(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Merge known fields into config and persist. Returns full config."""
        config = self.get_config()
        for key, value in fields.items():
            if key in CONFIG_DEFAULTS:
                config[key] = value
        self._config_file().write_text(json.dumps(config, indent=2), encoding="utf-8")
        return config
