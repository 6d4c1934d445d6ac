"""
Logging Configuration
"""

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger


def setup_logger(level: str = "WARNING", log_dir: Optional[Union[str, Path]] = None):
    """Setup application logger."""
    logger.remove()

    # Console (stdout carries the report, so logs go to stderr)
    if sys.stderr is not None:
        logger.add(
            sys.stderr,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
            level=level.upper(),
            colorize=None,
        )

    # File
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_dir / "syswatch_{time:YYYY-MM-DD}.log",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {message}",
            level="DEBUG",
            rotation="5 MB",
            retention="7 days"
        )

    return logger
