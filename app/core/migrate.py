"""
Database migration runner

Creates the `files` table and its indexes on the configured database.
Run once per deployment, before starting workers with SKIP_DB_INIT set:

    $ python -m app.core.migrate
"""

import asyncio
import sys

from app.core.config import settings
from app.core.database import engine, init_db
from app.core.logger import get_logger

logger = get_logger(__name__)


async def run_migration() -> int:
    """
    Returns:
        Process exit code (0 on success, 1 on failure)
    """
    if not settings.POSTGRES_URL and not settings.POSTGRES_SERVER:
        logger.error("Database URL is not configured (set POSTGRES_URL or POSTGRES_SERVER)")
        return 1

    try:
        await init_db()
        logger.info("All migrations completed")
        return 0
    except Exception as e:
        logger.error(f"Migration failed: {str(e)}", exc_info=True)
        return 1
    finally:
        await engine.dispose()


def main() -> None:
    sys.exit(asyncio.run(run_migration()))


if __name__ == "__main__":
    main()
