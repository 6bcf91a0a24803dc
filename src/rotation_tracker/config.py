from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Persisted session state
STATE_DIR = PROJECT_ROOT / "data" / "sets"
STATE_FILENAME = "team_state.json"
STATE_VERSION = 1

# Court positions in serve order; slot I is always the server
COURT_SLOTS = ("I", "II", "III", "IV", "V", "VI")
SUBSTITUTE_SLOT = "sub"

# One rotation step: occupant of key moves to value
ROTATION_MAP = {
    "II": "I",
    "III": "II",
    "IV": "III",
    "V": "IV",
    "VI": "V",
    "I": "VI",
}

PLAYER_ROLES = ("Setter", "Outside", "Middle", "Opposite", "Libero")
UNSPECIFIED_ROLE = ""

# Score sides
OUR_SIDE = "us"
THEIR_SIDE = "them"

# Match point styling threshold
MATCH_POINT_SCORE = 25
MATCH_POINT_MARGIN = 2

END_SET_PROMPT = (
    "Are you sure you want to end this set? "
    "The final score will be saved to history."
)
