"""State persistence - save and load the team session to/from JSON."""

import json
import logging
import math
from pathlib import Path
from typing import Dict, Optional

from src.rotation_tracker.config import (
    COURT_SLOTS,
    STATE_DIR,
    STATE_FILENAME,
    STATE_VERSION,
    SUBSTITUTE_SLOT,
)
from src.rotation_tracker.history_archive import HistoryArchive
from src.rotation_tracker.models import HistoryRecord, LineupEntry, Player, SetState
from src.rotation_tracker.roster_rules import RosterRules
from src.rotation_tracker.team_state import TeamState

logger = logging.getLogger(__name__)

_CORRUPT_DATA_ERRORS = (
    KeyError, TypeError, ValueError, AttributeError, OverflowError,
)


def _as_int(value, field: str) -> int:
    """Strict integer read: rejects bools, fractions, NaN and infinity."""
    if isinstance(value, bool):
        raise ValueError(f"{field} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise ValueError(f"{field} must be an integer, got {value!r}")
    return int(value)


class StatePersistence:
    """Handles converting TeamState to snapshots and storing them as JSON."""

    def __init__(
        self, storage_dir: Optional[Path] = None, filename: str = STATE_FILENAME
    ):
        self.storage_dir = storage_dir or STATE_DIR
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.filepath = self.storage_dir / filename

    def save_state(self, team_state: TeamState) -> Path:
        """Write the full session snapshot to disk.

        Raises:
            OSError: The file could not be written.
        """
        snapshot = self.to_snapshot(team_state)

        tmp_path = self.filepath.with_suffix(".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(snapshot, f, indent=2)
            tmp_path.replace(self.filepath)
        except Exception:
            tmp_path.unlink(missing_ok=True)
            raise

        logger.info(
            "Saved state (%d players, %s, %d completed sets) to %s",
            len(team_state.roster),
            "set in progress" if team_state.active_set else "no active set",
            len(team_state.history),
            self.filepath,
        )
        return self.filepath

    def load_state(self) -> TeamState:
        """Load the saved session, or an empty one if absent or unreadable."""
        if not self.filepath.exists():
            logger.info("No saved state at %s; starting fresh", self.filepath)
            return TeamState.create_new()

        try:
            with open(self.filepath, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("Unreadable state file %s: %s", self.filepath, e)
            return TeamState.create_new()

        team_state = self.from_snapshot(data)
        logger.info("Loaded state from %s", self.filepath)
        return team_state

    def export_history_csv(
        self, history: HistoryArchive, path: Optional[Path] = None
    ) -> Path:
        """Write the history table to CSV (default ``storage_dir/history.csv``)."""
        path = path or self.storage_dir / "history.csv"
        history.to_frame().to_csv(path, index=False)
        logger.info("Exported %d completed sets to %s", len(history), path)
        return path

    @classmethod
    def to_snapshot(cls, state: TeamState) -> Dict:
        """Convert TeamState to a JSON-serializable dict."""
        return {
            "version": STATE_VERSION,
            "roster": [
                {
                    "player_id": p.player_id,
                    "name": p.name,
                    "number": p.number,
                    "role": p.role,
                    "slot": p.slot,
                }
                for p in state.roster
            ],
            "active_set": (
                cls._set_to_dict(state.active_set) if state.active_set else None
            ),
            "history": [
                {
                    "our_score": record.our_score,
                    "their_score": record.their_score,
                    "starting_lineup": cls._lineup_to_dict(record.starting_lineup),
                    "started_at": record.started_at,
                    "completed_at": record.completed_at,
                }
                for record in state.history.list()
            ],
        }

    @classmethod
    def from_snapshot(cls, data) -> TeamState:
        """Reconstruct TeamState from a snapshot dict.

        Never raises: absent or corrupt input yields an empty session, a
        corrupt active set alone is dropped.
        """
        if not isinstance(data, dict):
            if data is not None:
                logger.warning(
                    "Ignoring state snapshot of type %s", type(data).__name__
                )
            return TeamState.create_new()

        try:
            roster = [cls._dict_to_player(pd) for pd in data.get("roster") or []]
            history = HistoryArchive(
                [cls._dict_to_record(rd) for rd in data.get("history") or []]
            )
            is_valid, error = RosterRules(roster).validate_roster()
            if not is_valid:
                raise ValueError(str(error))
        except _CORRUPT_DATA_ERRORS as e:
            logger.warning("Corrupt state snapshot, starting fresh: %s", e)
            return TeamState.create_new()

        active_set = None
        if data.get("active_set"):
            try:
                active_set = cls._dict_to_set(data["active_set"])
            except _CORRUPT_DATA_ERRORS as e:
                logger.warning("Dropping corrupt active set: %s", e)

        cls._demote_slot_conflicts(roster)
        return TeamState(roster=roster, active_set=active_set, history=history)

    @staticmethod
    def _lineup_to_dict(lineup: Dict[str, LineupEntry]) -> Dict[str, Dict]:
        return {
            slot: {
                "player_id": entry.player_id,
                "name": entry.name,
                "number": entry.number,
                "role": entry.role,
            }
            for slot, entry in lineup.items()
        }

    @classmethod
    def _set_to_dict(cls, set_state: SetState) -> Dict:
        return {
            "our_score": set_state.our_score,
            "their_score": set_state.their_score,
            "positions": {slot: set_state.positions[slot] for slot in COURT_SLOTS},
            "we_are_serving": set_state.we_are_serving,
            "starting_lineup": cls._lineup_to_dict(set_state.starting_lineup),
            "started_at": set_state.started_at,
        }

    @staticmethod
    def _dict_to_player(data: Dict) -> Player:
        slot = data.get("slot", SUBSTITUTE_SLOT)
        if slot not in COURT_SLOTS:
            slot = SUBSTITUTE_SLOT
        return Player(
            player_id=str(data["player_id"]),
            name=str(data["name"]),
            number=_as_int(data["number"], "number"),
            role=data.get("role") or "",
            slot=slot,
        )

    @staticmethod
    def _dict_to_lineup(data: Dict) -> Dict[str, LineupEntry]:
        lineup = {
            slot: LineupEntry(
                player_id=str(data[slot]["player_id"]),
                name=str(data[slot]["name"]),
                number=_as_int(data[slot]["number"], "number"),
                role=data[slot].get("role") or "",
            )
            for slot in COURT_SLOTS
        }
        return lineup

    @classmethod
    def _dict_to_set(cls, data: Dict) -> SetState:
        lineup = cls._dict_to_lineup(data["starting_lineup"])
        positions = {slot: str(data["positions"][slot]) for slot in COURT_SLOTS}

        # current positions must be a permutation of the starting six
        if sorted(positions.values()) != sorted(e.player_id for e in lineup.values()):
            raise ValueError("positions do not match the starting lineup")

        our_score = _as_int(data["our_score"], "our_score")
        their_score = _as_int(data["their_score"], "their_score")
        if our_score < 0 or their_score < 0:
            raise ValueError("negative score")

        we_are_serving = data["we_are_serving"]
        if not isinstance(we_are_serving, bool):
            raise ValueError(
                f"we_are_serving must be true or false, got {we_are_serving!r}"
            )

        return SetState(
            our_score=our_score,
            their_score=their_score,
            positions=positions,
            we_are_serving=we_are_serving,
            starting_lineup=lineup,
            started_at=str(data["started_at"]),
        )

    @classmethod
    def _dict_to_record(cls, data: Dict) -> HistoryRecord:
        return HistoryRecord(
            our_score=_as_int(data["our_score"], "our_score"),
            their_score=_as_int(data["their_score"], "their_score"),
            starting_lineup=cls._dict_to_lineup(data["starting_lineup"]),
            started_at=str(data["started_at"]),
            completed_at=str(data["completed_at"]),
        )

    @staticmethod
    def _demote_slot_conflicts(roster) -> None:
        """Send every player after the first in a court slot back to ``sub``."""
        holders = {}
        for player in roster:
            if player.slot == SUBSTITUTE_SLOT:
                continue
            if player.slot in holders:
                logger.warning(
                    "Moving %s to %s on load: position %s is already taken by %s",
                    player.label(),
                    SUBSTITUTE_SLOT,
                    player.slot,
                    holders[player.slot].label(),
                )
                player.slot = SUBSTITUTE_SLOT
            else:
                holders[player.slot] = player
