"""Data models for the roster, the live set and completed set records."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

from src.rotation_tracker.config import COURT_SLOTS, SUBSTITUTE_SLOT


@dataclass
class Player:
    """A roster player. Identity is ``player_id``; number and slot are attributes."""

    player_id: str
    name: str
    number: int
    role: str = ""
    slot: str = SUBSTITUTE_SLOT

    @property
    def is_on_court(self) -> bool:
        return self.slot in COURT_SLOTS

    def label(self) -> str:
        return f"#{self.number} {self.name}"


@dataclass(frozen=True)
class LineupEntry:
    """Copy of a player's display identity taken when a set starts."""

    player_id: str
    name: str
    number: int
    role: str = ""

    @classmethod
    def from_player(cls, player: Player) -> "LineupEntry":
        return cls(
            player_id=player.player_id,
            name=player.name,
            number=player.number,
            role=player.role,
        )

    def label(self) -> str:
        return f"#{self.number} {self.name}"


@dataclass
class SetState:
    """Live state of the set in progress."""

    our_score: int
    their_score: int
    positions: Dict[str, str]  # slot -> player_id, current rotation
    we_are_serving: bool
    starting_lineup: Dict[str, LineupEntry]
    started_at: str = field(default_factory=lambda: datetime.now().isoformat())

    @classmethod
    def create(
        cls, starting_lineup: Dict[str, LineupEntry], serving_first: bool
    ) -> "SetState":
        """Factory for a fresh set at 0-0 from a six-slot lineup."""
        if set(starting_lineup) != set(COURT_SLOTS):
            raise ValueError(
                f"starting_lineup must cover slots {COURT_SLOTS}, "
                f"got {sorted(starting_lineup)}"
            )
        lineup = {slot: starting_lineup[slot] for slot in COURT_SLOTS}
        return cls(
            our_score=0,
            their_score=0,
            positions={slot: entry.player_id for slot, entry in lineup.items()},
            we_are_serving=serving_first,
            starting_lineup=lineup,
        )

    def entry_for(self, player_id: str) -> Optional[LineupEntry]:
        """Look up an on-court player's lineup entry by id."""
        for entry in self.starting_lineup.values():
            if entry.player_id == player_id:
                return entry
        return None

    @property
    def server_id(self) -> str:
        return self.positions["I"]


@dataclass(frozen=True)
class HistoryRecord:
    """A completed set. Never modified after creation."""

    our_score: int
    their_score: int
    starting_lineup: Dict[str, LineupEntry]
    started_at: str
    completed_at: str

    @classmethod
    def from_set(cls, set_state: SetState) -> "HistoryRecord":
        return cls(
            our_score=set_state.our_score,
            their_score=set_state.their_score,
            starting_lineup=dict(set_state.starting_lineup),
            started_at=set_state.started_at,
            completed_at=datetime.now().isoformat(),
        )

    @property
    def score_line(self) -> str:
        return f"{self.our_score} - {self.their_score}"

    @property
    def won(self) -> bool:
        return self.our_score > self.their_score

    def format_rotation(self) -> List[str]:
        """Starting rotation as display lines, e.g. ``"I: #1 Player I"``."""
        return [
            f"{slot}: {self.starting_lineup[slot].label()}"
            for slot in COURT_SLOTS
            if slot in self.starting_lineup
        ]
