"""History archive - append-only list of completed sets."""

import logging
from typing import Iterator, List, Optional

import pandas as pd

from src.rotation_tracker.config import COURT_SLOTS
from src.rotation_tracker.models import HistoryRecord

logger = logging.getLogger(__name__)


class HistoryArchive:
    """Completed set records in insertion order."""

    def __init__(self, records: Optional[List[HistoryRecord]] = None):
        self._records: List[HistoryRecord] = list(records or [])

    def record(self, entry: HistoryRecord) -> None:
        """Append a completed set."""
        self._records.append(entry)
        logger.info(
            "Archived set %d: %s (started %s)",
            len(self._records),
            entry.score_line,
            entry.started_at,
        )

    def list(self) -> Iterator[HistoryRecord]:
        """Iterate records in insertion order.

        Each call returns a fresh iterator over the records present at call
        time; a later ``record`` does not leak into an iterator already taken.
        """
        return iter(tuple(self._records))

    def latest(self) -> Optional[HistoryRecord]:
        return self._records[-1] if self._records else None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[HistoryRecord]:
        return self.list()

    def to_frame(self) -> pd.DataFrame:
        """Tabular view of the archive, one row per set.

        Columns: ``set_number``, ``our_score``, ``their_score``, ``score``,
        ``result``, ``started_at``, ``completed_at`` and one ``pos_<slot>``
        column per court slot holding the starting player's label.
        """
        columns = [
            "set_number", "our_score", "their_score", "score", "result",
            "started_at", "completed_at",
        ] + [f"pos_{slot}" for slot in COURT_SLOTS]

        rows = []
        for i, entry in enumerate(self._records, start=1):
            row = {
                "set_number": i,
                "our_score": entry.our_score,
                "their_score": entry.their_score,
                "score": entry.score_line,
                "result": _result_code(entry),
                "started_at": entry.started_at,
                "completed_at": entry.completed_at,
            }
            for slot in COURT_SLOTS:
                lineup_entry = entry.starting_lineup.get(slot)
                row[f"pos_{slot}"] = lineup_entry.label() if lineup_entry else None
            rows.append(row)

        return pd.DataFrame(rows, columns=columns)


def _result_code(entry: HistoryRecord) -> str:
    if entry.our_score > entry.their_score:
        return "W"
    if entry.our_score < entry.their_score:
        return "L"
    return "T"
