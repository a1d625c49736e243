"""Run the game backend: ``python -m gamebackend``."""
from __future__ import annotations

import logging

import uvicorn

from .app import create_app
from .config import Settings, configure_logging
from .registry import UserRegistry

logger = logging.getLogger("gamebackend")


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info("Game server starting, listen address %s", settings.listen_address)

    app = create_app(UserRegistry(), settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
