import asyncio
import logging
from shop_admin.db.session import engine
from shop_admin.db.base_class import Base
# Import models so Base knows about them
from shop_admin import models  # noqa: F401

logger = logging.getLogger(__name__)

async def init_db():
    logger.info("Initializing database...")
    if not engine:
        logger.error("Database engine (from shop_admin.db.session) is not initialized. Cannot create tables.")
        return

    async with engine.begin() as conn:
        try:
            logger.info("Creating all tables...")
            await conn.run_sync(Base.metadata.create_all)
            logger.info("Tables created successfully.")
        except Exception as e:
            logger.error(f"Error during table creation: {e}")
            raise

    # The first admin account is created through POST /api/auth/create-admin
    logger.info("Database initialization complete.")

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(levelname)s:%(name)s:%(message)s')
    main_logger = logging.getLogger("__main__")

    from shop_admin.core.config import settings

    if not settings.DATABASE_URL:
        main_logger.error("DATABASE_URL not set in settings. Exiting.")
    elif not engine:
        main_logger.error("Database engine in shop_admin.db.session is None. Exiting.")
    else:
        db_url_display = str(settings.DATABASE_URL)
        if settings.POSTGRES_PASSWORD:
            db_url_display = db_url_display.replace(str(settings.POSTGRES_PASSWORD), '********')

        main_logger.info(f"Attempting DB initialization for: {db_url_display}")
        try:
            asyncio.run(init_db())
        except Exception:
            main_logger.exception("An error occurred during database initialization")
