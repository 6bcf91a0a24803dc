"""Roster rule enforcement and the error taxonomy for rejected operations."""

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from src.rotation_tracker.config import (
    COURT_SLOTS,
    PLAYER_ROLES,
    SUBSTITUTE_SLOT,
    UNSPECIFIED_ROLE,
)
from src.rotation_tracker.models import Player


class TrackerError(Exception):
    """Base class for operations rejected by the tracker."""

    pass


class ValidationError(TrackerError):
    """Raised when required player fields are missing or malformed."""

    pass


class DuplicateNumberError(TrackerError):
    """Raised when a jersey number is already used by another player."""

    pass


class SlotConflictError(TrackerError):
    """Raised when a court position is already occupied."""

    pass


class NotReadyError(TrackerError):
    """Raised when a set is started before all six positions are filled."""

    pass


class PlayerNotFoundError(TrackerError, KeyError):
    """Raised when an operation names a player id not on the roster."""

    def __str__(self):
        return str(self.args[0]) if self.args else ""


@dataclass(frozen=True)
class PlayerInput:
    """Checked player form input."""

    name: str
    number: int
    role: str = UNSPECIFIED_ROLE

    @classmethod
    def parse(
        cls, name, number, role=None
    ) -> Tuple[Optional["PlayerInput"], Optional[ValidationError]]:
        """
        Build a PlayerInput from raw form values.

        ``number`` may be an int or a numeric string such as ``"7"``.

        Returns:
            (player_input, None) on success, (None, ValidationError) otherwise.
        """
        if isinstance(name, str):
            name = name.strip()
        if isinstance(number, str):
            number = number.strip()

        if not name or number is None or number == "":
            return None, ValidationError(
                "Please fill in both name and number "
                "(name and number are required)."
            )

        if isinstance(number, bool) or (
            isinstance(number, float) and not number.is_integer()
        ):
            return None, ValidationError(f"Invalid jersey number: {number!r}")
        try:
            parsed_number = int(number)
        except (TypeError, ValueError, OverflowError):
            return None, ValidationError(f"Invalid jersey number: {number!r}")
        if parsed_number <= 0:
            return None, ValidationError(
                f"Jersey number must be a positive integer, got {parsed_number}"
            )

        role = role or UNSPECIFIED_ROLE
        if role != UNSPECIFIED_ROLE and role not in PLAYER_ROLES:
            return None, ValidationError(
                f"Unknown role '{role}'. Must be one of: {', '.join(PLAYER_ROLES)}"
            )

        return cls(name=str(name), number=parsed_number, role=role), None


class RosterRules:
    """Uniqueness checks over the roster. Never raises; callers decide."""

    VALID_SLOTS = set(COURT_SLOTS) | {SUBSTITUTE_SLOT}

    def __init__(self, players: Iterable[Player]):
        self.players = players

    def validate_number(
        self, number: int, exclude_player_id: Optional[str] = None
    ) -> Tuple[bool, Optional[DuplicateNumberError]]:
        """
        Check that ``number`` is not worn by anyone else.

        Returns:
            (is_valid, error) - (True, None) if valid
        """
        for player in self.players:
            if player.player_id == exclude_player_id:
                continue
            if player.number == number:
                return False, DuplicateNumberError(
                    f"Jersey number {number} is already taken."
                )
        return True, None

    def validate_slot(
        self, player_id: str, slot: str
    ) -> Tuple[bool, Optional[TrackerError]]:
        """
        Check that ``player_id`` may move to ``slot``.

        The substitute slot never conflicts.
        """
        if slot not in self.VALID_SLOTS:
            return False, ValidationError(
                f"Unknown position '{slot}'. "
                f"Must be one of: {', '.join(COURT_SLOTS)}, {SUBSTITUTE_SLOT}"
            )

        if slot == SUBSTITUTE_SLOT:
            return True, None

        for player in self.players:
            if player.slot == slot and player.player_id != player_id:
                return False, SlotConflictError(
                    f"Position {slot} is already taken by {player.name}."
                )
        return True, None

    def validate_roster(self) -> Tuple[bool, Optional[ValidationError]]:
        """
        Check whole-roster invariants: unique ids, unique positive numbers.

        Returns:
            (is_valid, error) - (True, None) if valid
        """
        seen_ids = set()
        seen_numbers = set()
        for player in self.players:
            if player.player_id in seen_ids:
                return False, ValidationError(
                    f"Player id {player.player_id} appears more than once"
                )
            if player.number <= 0:
                return False, ValidationError(
                    f"Jersey number must be a positive integer, got {player.number}"
                )
            if player.number in seen_numbers:
                return False, ValidationError(
                    f"Jersey number {player.number} is used more than once"
                )
            seen_ids.add(player.player_id)
            seen_numbers.add(player.number)
        return True, None

    def missing_slots(self) -> Tuple[str, ...]:
        """Court positions with no player assigned, in serve order."""
        filled = {p.slot for p in self.players}
        return tuple(slot for slot in COURT_SLOTS if slot not in filled)

    def validate_lineup(self) -> Tuple[bool, Optional[NotReadyError]]:
        """Check that I-VI are each held by exactly one distinct player."""
        on_court = [p for p in self.players if p.slot in COURT_SLOTS]
        slots = [p.slot for p in on_court]
        ids = {p.player_id for p in on_court}

        if len(slots) == len(COURT_SLOTS) and set(slots) == set(COURT_SLOTS) \
                and len(ids) == len(COURT_SLOTS):
            return True, None

        missing = self.missing_slots()
        if missing:
            detail = f" Missing: {', '.join(missing)}."
        else:
            detail = " A position is held by more than one player."
        return False, NotReadyError(
            "All six court positions must be filled before starting a set."
            + detail
        )
