"""
Logging Configuration

Configures the root logger once at startup. Modules log through
``logging.getLogger(__name__)``.
"""

import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Configure process-wide logging.

    Call this once in the FastAPI lifespan (or before driving the form
    workflow from a script).
    """
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # httpx logs every request at INFO; keep it quiet unless debugging
    logging.getLogger("httpx").setLevel(logging.WARNING)
