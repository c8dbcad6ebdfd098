from __future__ import annotations

import logging

import uvicorn

from .log import configure_logging
from .settings import get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
def main() -> None:
    """
    Serve the API on BIND_ADDRESS until interrupted.

    Usage:
        todo-api
        python -m todo_api
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Listening on %s:%d", settings.host, settings.port)
    uvicorn.run(
        "todo_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


if __name__ == "__main__":
    main()
