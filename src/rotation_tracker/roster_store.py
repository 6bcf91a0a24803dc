"""Roster store - player CRUD and court position assignment."""

import logging
import uuid
from typing import Dict, List, Optional

from src.rotation_tracker.config import COURT_SLOTS, SUBSTITUTE_SLOT
from src.rotation_tracker.models import Player
from src.rotation_tracker.roster_rules import (
    PlayerInput,
    PlayerNotFoundError,
    RosterRules,
)

logger = logging.getLogger(__name__)


class RosterStore:
    """Owns the roster's Player entities.

    Works on the ``players`` list it is given (normally ``TeamState.roster``),
    so every mutation is visible to the owning session state.
    """

    def __init__(self, players: List[Player]):
        self.players = players
        self.rules = RosterRules(players)

    def add_player(self, name, number, role=None) -> Player:
        """Validate and add a player on the substitute slot.

        Raises:
            ValidationError: Name or number missing or malformed.
            DuplicateNumberError: Number already on the roster.
        """
        player_input = self._checked_input(name, number, role)

        player = Player(
            player_id=str(uuid.uuid4()),
            name=player_input.name,
            number=player_input.number,
            role=player_input.role,
            slot=SUBSTITUTE_SLOT,
        )
        self.players.append(player)

        logger.info("Added player %s (%s)", player.label(), player.role or "no role")
        return player

    def edit_player(self, player_id: str, name, number, role=None) -> Player:
        """Update name, number and role. The slot assignment is untouched."""
        player = self.get_player(player_id)
        player_input = self._checked_input(
            name, number, role, exclude_player_id=player_id
        )

        previous = player.label()
        player.name = player_input.name
        player.number = player_input.number
        player.role = player_input.role

        logger.info("Edited player %s -> %s", previous, player.label())
        return player

    def remove_player(self, player_id: str) -> Player:
        """Remove a player. A vacated court slot is left empty."""
        player = self.get_player(player_id)
        self.players.remove(player)

        if player.is_on_court:
            logger.info(
                "Removed player %s; position %s is now empty",
                player.label(),
                player.slot,
            )
        else:
            logger.info("Removed player %s", player.label())
        return player

    def assign_slot(self, player_id: str, slot: str) -> Player:
        """Move a player to a court slot or to the substitute slot.

        Raises:
            SlotConflictError: ``slot`` is held by another player. The
                player keeps its previous slot.
        """
        player = self.get_player(player_id)

        is_valid, error = self.rules.validate_slot(player_id, slot)
        if not is_valid:
            logger.warning("Rejected position change for %s: %s", player.label(), error)
            raise error

        player.slot = slot
        logger.info("Assigned %s to position %s", player.label(), slot)
        return player

    def get_player(self, player_id: str) -> Player:
        for player in self.players:
            if player.player_id == player_id:
                return player
        raise PlayerNotFoundError(f"No player with id {player_id}")

    def find_by_number(self, number: int) -> Optional[Player]:
        for player in self.players:
            if player.number == number:
                return player
        return None

    def court_assignments(self) -> Dict[str, Optional[Player]]:
        """Current occupant of each court slot, derived from player slots."""
        assignments = {slot: None for slot in COURT_SLOTS}
        for player in self.players:
            if player.slot in assignments and assignments[player.slot] is None:
                assignments[player.slot] = player
        return assignments

    def substitutes(self) -> List[Player]:
        return [p for p in self.players if not p.is_on_court]

    def is_ready_to_start(self) -> bool:
        """True iff every court slot I-VI holds a distinct player."""
        is_valid, _ = self.rules.validate_lineup()
        return is_valid

    def __len__(self) -> int:
        return len(self.players)

    def _checked_input(
        self, name, number, role, exclude_player_id: Optional[str] = None
    ) -> PlayerInput:
        player_input, error = PlayerInput.parse(name, number, role)
        if error is not None:
            logger.warning("Invalid player input: %s", error)
            raise error

        is_valid, error = self.rules.validate_number(
            player_input.number, exclude_player_id=exclude_player_id
        )
        if not is_valid:
            logger.warning("Duplicate jersey number: %s", error)
            raise error

        return player_input
