"""Rotation engine - serve tracking, side-out rotation and score keeping."""

import logging
from typing import Dict, Optional

from src.rotation_tracker.config import (
    COURT_SLOTS,
    MATCH_POINT_MARGIN,
    MATCH_POINT_SCORE,
    OUR_SIDE,
    ROTATION_MAP,
    THEIR_SIDE,
)
from src.rotation_tracker.models import HistoryRecord, LineupEntry, SetState
from src.rotation_tracker.roster_store import RosterStore
from src.rotation_tracker.team_state import TeamState

logger = logging.getLogger(__name__)

NOT_STARTED = "not_started"
ACTIVE = "active"
ENDED = "ended"


def rotate(positions: Dict[str, str]) -> Dict[str, str]:
    """Apply one rotation step: II->I, III->II, IV->III, V->IV, VI->V, I->VI."""
    rotated = {ROTATION_MAP[slot]: positions[slot] for slot in COURT_SLOTS}
    return {slot: rotated[slot] for slot in COURT_SLOTS}


class RotationEngine:
    """State machine for a single set.

    ``not_started`` -> ``active`` via ``start_set``; ``active`` -> ``ended``
    via ``end_set``. From ``ended`` a new set may be started again.
    Point and score operations never raise on a live set; with no set in
    progress they log and do nothing.
    """

    def __init__(self, team_state: TeamState, roster: Optional[RosterStore] = None):
        self.team_state = team_state
        self.roster = roster if roster is not None else RosterStore(team_state.roster)

    @property
    def set_state(self) -> Optional[SetState]:
        return self.team_state.active_set

    @property
    def status(self) -> str:
        if self.team_state.active_set is not None:
            return ACTIVE
        if len(self.team_state.history) > 0:
            return ENDED
        return NOT_STARTED

    def start_set(self, serving_first: bool) -> SetState:
        """Start a set from the current court assignments.

        Raises:
            NotReadyError: Fewer than six distinct players on court.
            RuntimeError: A set is already in progress.
        """
        if self.team_state.active_set is not None:
            raise RuntimeError("A set is already in progress")

        is_valid, error = self.roster.rules.validate_lineup()
        if not is_valid:
            logger.warning("Cannot start set: %s", error)
            raise error

        lineup = {
            slot: LineupEntry.from_player(player)
            for slot, player in self.roster.court_assignments().items()
        }
        set_state = SetState.create(lineup, serving_first=serving_first)
        self.team_state.active_set = set_state

        logger.info(
            "Set started (%s first); server: %s",
            "we serve" if serving_first else "they serve",
            lineup["I"].label(),
        )
        return set_state

    def point_won(self) -> bool:
        """Our team won the rally.

        Returns:
            True if the point was a side-out and the lineup rotated.
        """
        set_state = self._live_set("point_won")
        if set_state is None:
            return False

        set_state.our_score += 1
        rotated = False

        if not set_state.we_are_serving:
            set_state.positions = rotate(set_state.positions)
            set_state.we_are_serving = True
            rotated = True
            server = set_state.entry_for(set_state.server_id)
            logger.info(
                "Side-out to us at %d-%d; rotating, %s to serve",
                set_state.our_score,
                set_state.their_score,
                server.label() if server else set_state.server_id,
            )
        else:
            logger.debug(
                "Point won on serve: %d-%d", set_state.our_score, set_state.their_score
            )

        return rotated

    def point_lost(self) -> bool:
        """The opponent won the rally. Our lineup never rotates here.

        Returns:
            True if we lost the serve on this point.
        """
        set_state = self._live_set("point_lost")
        if set_state is None:
            return False

        set_state.their_score += 1

        if set_state.we_are_serving:
            set_state.we_are_serving = False
            logger.info(
                "Side-out to opponent at %d-%d",
                set_state.our_score,
                set_state.their_score,
            )
            return True

        logger.debug(
            "Point lost while receiving: %d-%d",
            set_state.our_score,
            set_state.their_score,
        )
        return False

    def adjust_score(self, side: str, delta: int) -> int:
        """Manually correct a score by +1 or -1, floored at zero.

        Serve and rotation are not affected.

        Returns:
            The side's score after the adjustment (0 with no set in progress).

        Raises:
            ValueError: ``side`` or ``delta`` is not a recognised value.
        """
        if side not in (OUR_SIDE, THEIR_SIDE):
            raise ValueError(
                f"side must be '{OUR_SIDE}' or '{THEIR_SIDE}', got {side!r}"
            )
        if delta not in (1, -1):
            raise ValueError(f"delta must be +1 or -1, got {delta!r}")

        set_state = self._live_set("adjust_score")
        if set_state is None:
            return 0

        attr = "our_score" if side == OUR_SIDE else "their_score"
        current = getattr(set_state, attr)
        updated = max(0, current + delta)
        setattr(set_state, attr, updated)

        if updated != current:
            logger.debug("Adjusted %s score %d -> %d", side, current, updated)
        return updated

    def is_match_point(self, side: str) -> bool:
        """Whether ``side`` has reached 25+ with a lead of at least two."""
        set_state = self.team_state.active_set
        if set_state is None:
            return False

        if side == OUR_SIDE:
            score, other = set_state.our_score, set_state.their_score
        elif side == THEIR_SIDE:
            score, other = set_state.their_score, set_state.our_score
        else:
            raise ValueError(
                f"side must be '{OUR_SIDE}' or '{THEIR_SIDE}', got {side!r}"
            )

        return score >= MATCH_POINT_SCORE and score - other >= MATCH_POINT_MARGIN

    def end_set(self) -> HistoryRecord:
        """Freeze the final score with the starting lineup into history.

        Raises:
            RuntimeError: No set in progress.
        """
        set_state = self.team_state.active_set
        if set_state is None:
            raise RuntimeError("No set in progress")

        record = HistoryRecord.from_set(set_state)
        self.team_state.history.record(record)
        self.team_state.active_set = None

        logger.info("Set ended %s", record.score_line)
        return record

    def _live_set(self, action: str) -> Optional[SetState]:
        set_state = self.team_state.active_set
        if set_state is None:
            logger.warning("%s ignored: no set in progress", action)
        return set_state
