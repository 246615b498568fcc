"""
Root logger setup shared by the Lambda entry points.

The Lambda runtime installs its own handler on the root logger, so a
stream handler is only attached when running locally or under pytest.
"""

import logging

from ..config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> logging.Logger:
    """Apply ``level`` to the root logger and return it."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    # Unknown level names fall back to INFO
    level_value = logging.getLevelName(level)
    root.setLevel(level_value if isinstance(level_value, int) else logging.INFO)
    return root


logger = configure_logging()
