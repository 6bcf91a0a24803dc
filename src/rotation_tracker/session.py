"""Session bootstrap for the hosting shell."""

import logging
from pathlib import Path
from typing import Callable, Optional

from src.logging_config import setup_logging
from src.rotation_tracker.set_controller import SetController
from src.rotation_tracker.state_persistence import StatePersistence

logger = logging.getLogger(__name__)


def open_session(
    storage_dir: Optional[Path] = None,
    log_level: str = "INFO",
    log_dir: Optional[Path] = None,
    on_view_change: Optional[Callable[[str], None]] = None,
) -> SetController:
    """Configure logging and restore the saved session.

    If the storage directory cannot be created the session runs in memory
    only and the reason is recorded in ``controller.warnings``.
    """
    setup_logging(log_level, log_dir=log_dir)

    try:
        persistence = StatePersistence(storage_dir=storage_dir)
    except OSError as e:
        logger.warning("Persistence unavailable, running in memory only: %s", e)
        controller = SetController(on_view_change=on_view_change)
        controller.warnings.append(
            f"Persistence unavailable, running in memory only: {e}"
        )
        return controller

    controller = SetController.from_storage(persistence, on_view_change=on_view_change)
    logger.info(
        "Session opened: %d players, %s, %d completed sets",
        len(controller.roster),
        "set in progress" if controller.team_state.active_set else "no active set",
        len(controller.team_state.history),
    )
    return controller
