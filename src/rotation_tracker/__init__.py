from src.rotation_tracker.history_archive import HistoryArchive
from src.rotation_tracker.models import HistoryRecord, LineupEntry, Player, SetState
from src.rotation_tracker.roster_rules import (
    DuplicateNumberError,
    NotReadyError,
    PlayerInput,
    PlayerNotFoundError,
    RosterRules,
    SlotConflictError,
    TrackerError,
    ValidationError,
)
from src.rotation_tracker.roster_store import RosterStore
from src.rotation_tracker.rotation_engine import RotationEngine, rotate
from src.rotation_tracker.set_controller import SetController
from src.rotation_tracker.session import open_session
from src.rotation_tracker.state_persistence import StatePersistence
from src.rotation_tracker.team_state import TeamState

__all__ = [
    "DuplicateNumberError",
    "HistoryArchive",
    "HistoryRecord",
    "LineupEntry",
    "NotReadyError",
    "Player",
    "PlayerInput",
    "PlayerNotFoundError",
    "RosterRules",
    "RosterStore",
    "RotationEngine",
    "SetController",
    "SetState",
    "SlotConflictError",
    "StatePersistence",
    "TeamState",
    "TrackerError",
    "ValidationError",
    "open_session",
    "rotate",
]
