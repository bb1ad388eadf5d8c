"""Loguru sinks for the agenda service and CLI."""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = "<dim>{time:HH:mm:ss.SSS}</dim> <level>{level: <7}</level> <cyan>{module}</cyan> {message}"
FILE_FORMAT = "{time:YYYY-MM-DDTHH:mm:ss.SSSZZ} {level: <7} {module}:{line} {message}"


def setup_logger(
    level: str = "INFO",
    log_file: str | Path | None = None,
    rotation: str = "5 MB",
    retention: int = 5,
) -> None:
    """Replace loguru's default sink with the agenda sinks.

    Args:
        level: Minimum level for every sink
        log_file: Optional log file; its parent directory is created
        rotation: Size or interval at which the file rolls over
        retention: Number of rolled files to keep
    """
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(path, format=FILE_FORMAT, level=level, rotation=rotation, retention=retention, encoding="utf-8")

    logger.debug(f"[LOGGER] level={level} file={log_file or '-'}")
