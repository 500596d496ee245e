"""Status API route: application and database health."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from portcullis.config import get_settings
from portcullis.infrastructure.database import check_connection, get_db

settings = get_settings()

router = APIRouter(prefix="/api/status", tags=["Status"])


@router.get("")
async def get_status(db: AsyncSession = Depends(get_db)):
    database_ok = await check_connection(db)
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "status": "running" if database_ok else "degraded",
        "database": "connected" if database_ok else "unavailable",
    }
