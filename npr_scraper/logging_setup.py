import logging
import os
import sys
from typing import Optional

LOGGER_NAME = "npr-scraper"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure the scraper logger; level falls back to LOG_LEVEL, then INFO."""
    level = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Lambda containers are reused between invocations
    if not any(getattr(h, "_npr_scraper", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handler._npr_scraper = True
        logger.addHandler(handler)

    return logger
