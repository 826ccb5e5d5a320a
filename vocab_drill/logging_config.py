"""
Logging setup for vocab_drill.

Console output always; a rotating file under ``log_dir`` when one is
configured. Modules obtain their logger with ``logging.getLogger(__name__)``
so everything lands under the ``vocab_drill`` hierarchy.
"""

import logging
import logging.handlers
import os
from typing import Optional

ROOT_LOGGER = "vocab_drill"


def setup_logging(
    log_level: str = "INFO",
    log_dir: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """
    Configure the ``vocab_drill`` logger.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR
        log_dir: directory for ``vocab_drill.log``; console only when empty
        json_format: one JSON object per line instead of the readable format

    Returns:
        The configured package logger.
    """
    level = getattr(logging, (log_level or "INFO").upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    logger.handlers.clear()

    if json_format:
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(module)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    formatter = logging.Formatter(format_str, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, "vocab_drill.log"),
            maxBytes=10 * 1024 * 1024,  # 10 MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.info("Logging initialized: level=%s, dir=%s", log_level, log_dir or "-")
    return logger
