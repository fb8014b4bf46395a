"""
Reset Database Script
Drops and recreates every table. Destroys all data.
Usage: python -m app.scripts.reset_db
"""

import asyncio
import logging

from app.config import get_settings
from app.database import build_engine, drop_db, init_db
from app.logging_config import setup_logging

logger = logging.getLogger("app.scripts.reset_db")


async def reset_db():
    engine = build_engine(get_settings())
    try:
        logger.info("Resetting database...")
        await drop_db(engine)
        await init_db(engine)
        logger.info("Database reset complete.")
    finally:
        await engine.dispose()


if __name__ == "__main__":
    setup_logging()
    asyncio.run(reset_db())
