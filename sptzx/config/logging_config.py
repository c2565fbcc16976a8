"""
Logging Configuration

Configures standard-library logging for the service process.
"""

import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    Configures the root logger for the application.
    Call once at startup, from the entry point.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        stream=sys.stdout,
    )
    # Silence noisy libraries
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
