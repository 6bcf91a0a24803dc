"""Tests for player input parsing and roster uniqueness rules."""

import pytest

from src.rotation_tracker.models import Player
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


def _make_players():
    return [
        Player(player_id="a", name="Alice", number=10, role="Setter", slot="I"),
        Player(player_id="b", name="Bob", number=5, role="Middle", slot="sub"),
    ]


# ── PlayerInput ──────────────────────────────────────────────────────

class TestPlayerInputParse:
    def test_valid_input(self):
        player_input, error = PlayerInput.parse("Alice", "10", "Setter")
        assert error is None
        assert player_input == PlayerInput(name="Alice", number=10, role="Setter")

    def test_int_number_accepted(self):
        player_input, error = PlayerInput.parse("Alice", 10)
        assert error is None
        assert player_input.number == 10

    def test_name_is_stripped(self):
        player_input, _ = PlayerInput.parse("  Alice ", " 7 ")
        assert player_input.name == "Alice"
        assert player_input.number == 7

    def test_role_defaults_to_unspecified(self):
        player_input, _ = PlayerInput.parse("Alice", "10")
        assert player_input.role == ""

    @pytest.mark.parametrize("name,number", [
        ("", "10"), ("   ", "10"), (None, "10"),
        ("Alice", ""), ("Alice", None), ("Alice", "  "),
    ])
    def test_missing_fields_rejected(self, name, number):
        player_input, error = PlayerInput.parse(name, number)
        assert player_input is None
        assert isinstance(error, ValidationError)
        assert "name and number are required" in str(error)

    @pytest.mark.parametrize(
        "number", ["abc", "1.5", "0", "-3", 0, True, 7.9, float("inf")]
    )
    def test_bad_numbers_rejected(self, number):
        player_input, error = PlayerInput.parse("Alice", number)
        assert player_input is None
        assert isinstance(error, ValidationError)

    def test_integral_float_accepted(self):
        player_input, error = PlayerInput.parse("Alice", 7.0)
        assert error is None
        assert player_input.number == 7

    def test_unknown_role_rejected(self):
        _, error = PlayerInput.parse("Alice", "10", "Goalkeeper")
        assert isinstance(error, ValidationError)
        assert "Unknown role" in str(error)


# ── Number uniqueness ────────────────────────────────────────────────

class TestValidateNumber:
    def test_free_number(self):
        rules = RosterRules(_make_players())
        assert rules.validate_number(7) == (True, None)

    def test_taken_number(self):
        rules = RosterRules(_make_players())
        is_valid, error = rules.validate_number(10)
        assert not is_valid
        assert isinstance(error, DuplicateNumberError)
        assert "number 10 is already taken" in str(error)

    def test_own_number_excluded(self):
        rules = RosterRules(_make_players())
        assert rules.validate_number(10, exclude_player_id="a") == (True, None)


class TestValidateRoster:
    def test_valid_roster(self):
        assert RosterRules(_make_players()).validate_roster() == (True, None)

    def test_duplicate_id(self):
        players = _make_players() + [Player(player_id="a", name="Ann", number=3)]
        is_valid, error = RosterRules(players).validate_roster()
        assert not is_valid
        assert "appears more than once" in str(error)

    def test_duplicate_number(self):
        players = _make_players() + [Player(player_id="c", name="Cy", number=5)]
        is_valid, error = RosterRules(players).validate_roster()
        assert not is_valid
        assert "used more than once" in str(error)

    def test_non_positive_number(self):
        players = [Player(player_id="c", name="Cy", number=-3)]
        is_valid, error = RosterRules(players).validate_roster()
        assert not is_valid
        assert isinstance(error, ValidationError)


# ── Slot checks ──────────────────────────────────────────────────────

class TestValidateSlot:
    def test_free_slot(self):
        rules = RosterRules(_make_players())
        assert rules.validate_slot("b", "II") == (True, None)

    def test_occupied_slot(self):
        rules = RosterRules(_make_players())
        is_valid, error = rules.validate_slot("b", "I")
        assert not is_valid
        assert isinstance(error, SlotConflictError)
        assert "Position I is already taken" in str(error)

    def test_reassigning_own_slot_is_fine(self):
        rules = RosterRules(_make_players())
        assert rules.validate_slot("a", "I") == (True, None)

    def test_substitute_never_conflicts(self):
        rules = RosterRules(_make_players())
        assert rules.validate_slot("a", "sub") == (True, None)

    def test_unknown_slot(self):
        rules = RosterRules(_make_players())
        is_valid, error = rules.validate_slot("a", "VII")
        assert not is_valid
        assert isinstance(error, ValidationError)


# ── Lineup readiness ─────────────────────────────────────────────────

class TestValidateLineup:
    def test_missing_slots_listed(self):
        rules = RosterRules(_make_players())
        assert rules.missing_slots() == ("II", "III", "IV", "V", "VI")
        is_valid, error = rules.validate_lineup()
        assert not is_valid
        assert isinstance(error, NotReadyError)
        assert "Missing: II, III, IV, V, VI" in str(error)

    def test_full_lineup(self):
        players = [
            Player(player_id=str(i), name=f"P{i}", number=i, slot=slot)
            for i, slot in enumerate(["I", "II", "III", "IV", "V", "VI"], start=1)
        ]
        assert RosterRules(players).validate_lineup() == (True, None)

    def test_duplicate_slot_not_ready(self):
        players = [
            Player(player_id=str(i), name=f"P{i}", number=i, slot=slot)
            for i, slot in enumerate(["I", "I", "III", "IV", "V", "VI"], start=1)
        ]
        is_valid, error = RosterRules(players).validate_lineup()
        assert not is_valid
        assert "Missing: II" in str(error)


class TestErrorTaxonomy:
    @pytest.mark.parametrize("cls", [
        ValidationError, DuplicateNumberError, SlotConflictError,
        NotReadyError, PlayerNotFoundError,
    ])
    def test_all_errors_share_base(self, cls):
        assert issubclass(cls, TrackerError)

    def test_player_not_found_is_key_error_with_plain_message(self):
        err = PlayerNotFoundError("No player with id x")
        assert isinstance(err, KeyError)
        assert str(err) == "No player with id x"
