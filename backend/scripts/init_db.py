#!/usr/bin/env python3
"""
Database initialization script: migrations plus predefined definition seeding
"""

import asyncio
import subprocess
import sys
from pathlib import Path

from loguru import logger
from sqlalchemy import text

from newsreader.core.config import settings
from newsreader.core.database import AsyncSessionLocal, close_db, engine
from newsreader.domains.news_store import NewsStoreFacade

BACKEND_DIR = Path(__file__).resolve().parent.parent
DEFAULT_SEED_FILE = BACKEND_DIR / "config" / "predefined_definitions.yaml"


async def wait_for_database(max_retries: int = 30, retry_delay: int = 2):
    """Wait for database to be ready"""
    logger.info("Waiting for database to be ready...")

    for attempt in range(max_retries):
        try:
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database is ready!")
            return True
        except Exception as e:
            logger.warning(f"Database not ready (attempt {attempt + 1}/{max_retries}): {e}")
            if attempt < max_retries - 1:
                await asyncio.sleep(retry_delay)
            else:
                logger.error("Database failed to become ready after maximum retries")
                return False

    return False


def apply_migrations():
    """Apply database migrations"""
    logger.info("Applying database migrations...")

    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        capture_output=True,
        text=True,
        cwd=str(BACKEND_DIR),
        check=False,
    )

    if result.returncode == 0:
        logger.info("Migrations applied successfully!")
        if result.stdout:
            logger.info(f"Migration output: {result.stdout}")
        return True

    logger.error(f"Migration failed: {result.stderr}")
    return False


async def seed_predefined_definitions():
    """Load predefined definitions from PREDEFINED_DEFINITIONS_PATH or the bundled file"""
    seed_path = settings.PREDEFINED_DEFINITIONS_PATH or DEFAULT_SEED_FILE
    async with AsyncSessionLocal() as session:
        stored = await NewsStoreFacade(session).seed_predefined_definitions(seed_path)
    logger.info(f"Predefined definitions available: {len(stored)}")


async def initialize_database():
    """Initialize database with migrations and seed data"""
    logger.info(f"Starting database initialization for {settings.APP_NAME} {settings.VERSION} ({settings.ENVIRONMENT})")

    try:
        if not await wait_for_database():
            logger.error("Failed to connect to database")
            return False

        if not apply_migrations():
            logger.error("Failed to apply migrations")
            return False

        await seed_predefined_definitions()
    finally:
        await close_db()

    logger.info("Database initialization completed successfully!")
    return True


if __name__ == "__main__":
    logger.remove()
    logger.add(sys.stderr, level=settings.LOG_LEVEL)

    success = asyncio.run(initialize_database())

    if not success:
        logger.error("Database initialization failed!")
        sys.exit(1)

    sys.exit(0)
