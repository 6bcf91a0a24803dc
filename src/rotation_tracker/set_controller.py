"""Set controller - orchestrates roster edits, set lifecycle and persistence."""

import logging
from typing import Callable, Dict, List, Optional

from src.rotation_tracker.config import (
    COURT_SLOTS,
    END_SET_PROMPT,
    OUR_SIDE,
    THEIR_SIDE,
)
from src.rotation_tracker.models import HistoryRecord, LineupEntry, Player, SetState
from src.rotation_tracker.roster_store import RosterStore
from src.rotation_tracker.rotation_engine import RotationEngine
from src.rotation_tracker.state_persistence import StatePersistence
from src.rotation_tracker.team_state import TeamState

logger = logging.getLogger(__name__)

SETUP_VIEW = "setup"
ACTIVE_VIEW = "active"


class SetController:
    """Main entry point for a tracking session.

    Coordinates RosterStore (roster and positions), RotationEngine (live set)
    and StatePersistence (save after each successful mutation). Persistence
    failures are downgraded to warnings and the session continues in memory.
    """

    def __init__(
        self,
        team_state: Optional[TeamState] = None,
        persistence: Optional[StatePersistence] = None,
        on_view_change: Optional[Callable[[str], None]] = None,
    ):
        self.team_state = team_state if team_state is not None else TeamState.create_new()
        self.persistence = persistence
        self.on_view_change = on_view_change
        self.roster = RosterStore(self.team_state.roster)
        self.engine = RotationEngine(self.team_state, self.roster)
        self.warnings: List[str] = []
        self._end_requested = False

    @classmethod
    def from_storage(
        cls,
        persistence: StatePersistence,
        on_view_change: Optional[Callable[[str], None]] = None,
    ) -> "SetController":
        """Hydrate a session from saved state; falls back to an empty one."""
        try:
            team_state = persistence.load_state()
        except OSError as e:
            logger.warning("Could not load saved state, starting fresh: %s", e)
            team_state = TeamState.create_new()
        return cls(team_state, persistence, on_view_change)

    # ── Roster ───────────────────────────────────────────────────────

    def add_player(self, name, number, role=None) -> Player:
        player = self.roster.add_player(name, number, role)
        self._persist()
        return player

    def edit_player(self, player_id: str, name, number, role=None) -> Player:
        player = self.roster.edit_player(player_id, name, number, role)
        self._persist()
        return player

    def remove_player(self, player_id: str) -> Player:
        player = self.roster.remove_player(player_id)
        self._persist()
        return player

    def assign_slot(self, player_id: str, slot: str) -> Player:
        player = self.roster.assign_slot(player_id, slot)
        self._persist()
        return player

    def is_ready_to_start(self) -> bool:
        return self.roster.is_ready_to_start()

    # ── Set lifecycle ────────────────────────────────────────────────

    def start_set(self, serving_first: bool) -> SetState:
        """Start a set and switch to the gameplay view.

        Raises:
            NotReadyError: Fewer than six court positions are filled.
        """
        set_state = self.engine.start_set(serving_first)
        self._end_requested = False
        self._persist()
        self._notify_view(ACTIVE_VIEW)
        return set_state

    def point_won(self) -> bool:
        rotated = self.engine.point_won()
        self._persist()
        return rotated

    def point_lost(self) -> bool:
        side_out = self.engine.point_lost()
        self._persist()
        return side_out

    def adjust_score(self, side: str, delta: int) -> int:
        score = self.engine.adjust_score(side, delta)
        self._persist()
        return score

    def request_end(self) -> str:
        """First phase of ending a set: returns the confirmation prompt.

        Raises:
            RuntimeError: No set in progress.
        """
        if self.team_state.active_set is None:
            raise RuntimeError("No set in progress")
        self._end_requested = True
        return END_SET_PROMPT

    def cancel_end(self) -> None:
        self._end_requested = False

    def confirm_end(self) -> HistoryRecord:
        """Second phase: archive the set and return to the setup view.

        Raises:
            RuntimeError: ``request_end`` was not called first.
        """
        if not self._end_requested:
            raise RuntimeError("End of set must be requested before it is confirmed")

        record = self.engine.end_set()
        self._end_requested = False
        self._persist()
        self._notify_view(SETUP_VIEW)
        return record

    @property
    def end_pending(self) -> bool:
        return self._end_requested

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def status(self) -> str:
        return self.engine.status

    @property
    def current_view(self) -> str:
        return ACTIVE_VIEW if self.team_state.active_set else SETUP_VIEW

    @property
    def our_score(self) -> int:
        set_state = self.team_state.active_set
        return set_state.our_score if set_state else 0

    @property
    def their_score(self) -> int:
        set_state = self.team_state.active_set
        return set_state.their_score if set_state else 0

    @property
    def we_are_serving(self) -> Optional[bool]:
        set_state = self.team_state.active_set
        return set_state.we_are_serving if set_state else None

    def is_match_point(self, side: str = OUR_SIDE) -> bool:
        return self.engine.is_match_point(side)

    def match_point_flags(self) -> Dict[str, bool]:
        return {
            OUR_SIDE: self.engine.is_match_point(OUR_SIDE),
            THEIR_SIDE: self.engine.is_match_point(THEIR_SIDE),
        }

    def court_positions(self) -> Dict[str, Optional[LineupEntry]]:
        """Who stands in each slot right now.

        During a set this is the rotated lineup; otherwise the roster's
        current assignments.
        """
        set_state = self.team_state.active_set
        if set_state is not None:
            return {
                slot: set_state.entry_for(set_state.positions[slot])
                for slot in COURT_SLOTS
            }
        return {
            slot: LineupEntry.from_player(player) if player else None
            for slot, player in self.roster.court_assignments().items()
        }

    def history(self):
        return self.team_state.history.list()

    @property
    def persistence_enabled(self) -> bool:
        return self.persistence is not None

    def snapshot(self) -> Dict:
        """Full serializable state."""
        return StatePersistence.to_snapshot(self.team_state)

    def _persist(self) -> None:
        if self.persistence is None:
            return
        try:
            self.persistence.save_state(self.team_state)
        except OSError as e:
            message = f"Could not save state, continuing in memory only: {e}"
            logger.warning("%s", message)
            self.warnings.append(message)
            self.persistence = None

    def _notify_view(self, view: str) -> None:
        logger.info("View -> %s", view)
        if self.on_view_change is not None:
            self.on_view_change(view)
