"""Team session state - single source of truth for roster, live set and history."""

from dataclasses import dataclass, field
from typing import List, Optional

from src.rotation_tracker.history_archive import HistoryArchive
from src.rotation_tracker.models import Player, SetState


@dataclass
class TeamState:
    """Complete session state. One instance per running app session."""

    roster: List[Player] = field(default_factory=list)
    active_set: Optional[SetState] = None
    history: HistoryArchive = field(default_factory=HistoryArchive)

    @classmethod
    def create_new(cls) -> "TeamState":
        """Empty roster, no set in progress, empty archive."""
        return cls()

    @property
    def has_active_set(self) -> bool:
        return self.active_set is not None
