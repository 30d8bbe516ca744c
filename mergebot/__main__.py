"""Serve the webhook receiver: ``python -m mergebot``."""

import os

import uvicorn

from mergebot.app import Settings, create_app
from mergebot.logging import configure_logging


def main() -> None:
    settings = Settings.from_env()
    configure_logging(level=settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=os.environ.get("MERGEBOT_HOST", "0.0.0.0"),
        port=int(os.environ.get("MERGEBOT_PORT", "3000")),
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
