import logging
import logging.handlers
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Configure root logging for a tracker session (idempotent)."""
    root_logger = logging.getLogger()
    if root_logger.handlers:
        return

    level = getattr(logging, log_level.upper(), logging.INFO)
    root_logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # Point-by-point DEBUG lines go to the file only (5MB max, keep 3 backups)
    log_dir = log_dir or Path(__file__).parent.parent / "logs"
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / "rotation_tracker.log", maxBytes=5 * 1024 * 1024, backupCount=3
        )
    except OSError as e:
        logging.getLogger(__name__).warning(
            "File logging disabled, cannot write to %s: %s", log_dir, e
        )
    else:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logging.getLogger(__name__).info("Logging initialized (level=%s)", log_level)
