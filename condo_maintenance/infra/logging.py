from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from condo_maintenance.config import SETTINGS, PROJECT_ROOT

LOG_FILE_NAME = "condo_maintenance.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: str | None = None) -> None:
    """Log to a rotating file under ``LOG_DIR`` and to the console.

    ``level`` overrides ``LOG_LEVEL`` for this run. SQL statement logging stays
    at WARNING unless DEBUG is requested.
    """
    level_name = (level or SETTINGS.log_level).upper()
    log_dir = PROJECT_ROOT / SETTINGS.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    file_handler = RotatingFileHandler(log_dir / LOG_FILE_NAME, maxBytes=2_000_000, backupCount=3)
    file_handler.setFormatter(formatter)

    # Console output goes to stderr so command output on stdout stays clean.
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING if level_name != "DEBUG" else logging.DEBUG)

    logging.basicConfig(level=level_name, handlers=[file_handler, console_handler])
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level_name == "DEBUG" else logging.WARNING
    )
