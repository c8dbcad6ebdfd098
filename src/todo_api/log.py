from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO") -> None:
    """
    Send log records to stdout at the given level.

    logging.basicConfig is a no-op once the root logger has handlers, so only
    the level is refreshed on repeated calls.
    """
    logging.basicConfig(
        level=level,
        handlers=[logging.StreamHandler(sys.stdout)],
        format=LOG_FORMAT,
    )
    logging.getLogger().setLevel(level)
