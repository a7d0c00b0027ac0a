"""attendbot entry point."""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path


def _setup_logging() -> logging.Logger:
    """Configure logging with rotation.

    Logs are written to ~/.attendbot/logs/ with owner-only permissions.
    Uses INFO level by default; set ATTENDBOT_DEBUG=1 for DEBUG level.
    """
    log_dir = Path.home() / ".attendbot" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_dir.chmod(0o700)

    log_file = log_dir / "attendbot.log"

    log_level = logging.DEBUG if os.environ.get("ATTENDBOT_DEBUG") else logging.INFO

    # 5 MB per file, keep 3 backups
    handler = RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(handler)

    return logging.getLogger(__name__)


def main() -> None:
    """Entry point for the attendbot command."""
    from .cli import run_cli

    logger = _setup_logging()
    logger.info("attendbot starting")
    sys.exit(run_cli())


if __name__ == "__main__":
    main()
