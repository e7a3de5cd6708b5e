"""Entry: validate configuration and start the API server."""
import logging
import sys

import uvicorn

from shazam_forever.config import API_HOST, APP_TITLE, ConfigError, load_settings


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    try:
        settings = load_settings()
    except ConfigError as e:
        logging.getLogger(__name__).error("Cannot start %s: %s", APP_TITLE, e)
        sys.exit(1)

    logging.getLogger(__name__).info("Starting %s app...", APP_TITLE)
    uvicorn.run(
        "shazam_forever.api.app:app",
        host=API_HOST,
        port=settings.port,
    )


if __name__ == "__main__":
    main()
