from typing import AsyncIterator

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from fastapi import HTTPException, status
import logging

from shop_admin.core.config import settings

logger = logging.getLogger(__name__)

engine = None
SessionLocal = None

if not settings.DATABASE_URL:
    logger.error("DATABASE_URL is not set. Please check your environment variables and configuration.")
else:
    # Mask password in log
    display_db_url = settings.DATABASE_URL
    if settings.POSTGRES_PASSWORD:
        display_db_url = display_db_url.replace(settings.POSTGRES_PASSWORD, "********")
    logger.info("Configuring database engine for %s", display_db_url)

    try:
        engine = create_async_engine(
            settings.DATABASE_URL,
            pool_pre_ping=True,
        )
        SessionLocal = async_sessionmaker(
            bind=engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False
        )
    except Exception as e:
        # The driver may be missing in tooling contexts; requests will get a 503 from get_db
        logger.error("Failed to create database engine or SessionLocal: %s", e)


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Dependency to get a database session.
    Ensures the session is closed after the request.
    """
    if not SessionLocal:
        logger.error("SessionLocal is not initialized. Database connection might have failed during app startup.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database connection is not available."
        )

    db: AsyncSession = SessionLocal()
    try:
        yield db
    finally:
        await db.close()
