"""
Logging Configuration
"""

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = None) -> None:
    """
    Configure root logging once for the process.

    Level comes from the argument, else LOG_LEVEL, else INFO.
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(format=LOG_FORMAT, level=getattr(logging, level_name, logging.INFO))

    # httpx logs every request at INFO; the client logs its own summary
    logging.getLogger("httpx").setLevel(logging.WARNING)
