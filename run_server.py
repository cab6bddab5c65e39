#!/usr/bin/env python3
"""Run the AstroTasks web server."""
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from dotenv import load_dotenv
load_dotenv()

logger = logging.getLogger("astrotasks.server")


def main() -> int:
    import uvicorn

    from astrotasks.config import get_settings
    from astrotasks.db.database import Database
    from astrotasks.db.schema import SchemaInitializer
    from astrotasks.errors import StartupError
    from astrotasks.logging_setup import setup_logging
    from server.app import create_app

    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    db = Database(
        settings.database_path,
        pool_size=settings.DB_POOL_SIZE,
        pool_timeout=settings.DB_POOL_TIMEOUT,
    )
    initializer = SchemaInitializer(
        db,
        max_attempts=settings.DB_INIT_RETRIES,
        delay=settings.DB_INIT_RETRY_DELAY,
    )
    # Never listen before the schema is in place.
    try:
        initializer.run()
    except StartupError as e:
        logger.critical(f"Failed to start server: {e}")
        db.close()
        return 1

    logger.info(f"Server running at http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(
        create_app(settings, db=db, initializer=initializer),
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
