"""
Production entry point: probe the database, then serve the contact API.
Run: python -m api (from repo root, with .env or env vars set).
"""
import logging
import sys

import uvicorn

from api.main import create_app
from rolodex.application import Unreachable
from rolodex.infrastructure import PoolManager, Settings, configure_logging, load_env

logger = logging.getLogger("api")


def main() -> int:
    load_env()
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    pool = PoolManager.from_settings(settings)
    try:
        pool.probe(settings.probe_attempts, settings.probe_delay)
    except Unreachable as e:
        logger.critical("Not serving: %s", e)
        pool.dispose()
        return 1

    app = create_app(settings, pool=pool)
    logger.info("Serving on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
