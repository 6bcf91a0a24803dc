"""Shared fixtures for the rotation tracker test suite."""

import pytest

from src.rotation_tracker.config import COURT_SLOTS
from src.rotation_tracker.roster_store import RosterStore
from src.rotation_tracker.rotation_engine import RotationEngine
from src.rotation_tracker.team_state import TeamState

LINEUP_ROLES = ("Setter", "Outside", "Middle", "Opposite", "Outside", "Middle")


def fill_lineup(roster: RosterStore):
    """Add "Player I".."Player VI" wearing #1-#6 and put each in its slot."""
    players = []
    for i, (slot, role) in enumerate(zip(COURT_SLOTS, LINEUP_ROLES), start=1):
        player = roster.add_player(f"Player {slot}", str(i), role)
        roster.assign_slot(player.player_id, slot)
        players.append(player)
    return players


# ------------------------------------------------------------------
# Session state – cheap to construct, no I/O
# ------------------------------------------------------------------

@pytest.fixture
def team_state():
    return TeamState.create_new()


@pytest.fixture
def roster(team_state):
    return RosterStore(team_state.roster)


@pytest.fixture
def lineup(roster):
    """Six players assigned to I-VI, in slot order."""
    return fill_lineup(roster)


@pytest.fixture
def engine(team_state, roster, lineup):
    """Engine over a ready roster, no set started yet."""
    return RotationEngine(team_state, roster)
