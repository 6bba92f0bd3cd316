"""
Health check - verifies database connectivity.
"""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from teisesdraugas.core.config import settings
from teisesdraugas.core.logger import logger
from teisesdraugas.db.database import get_db

router = APIRouter()


@router.get("")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.error(f"Health check database error: {str(e)}")
        database = "error"

    return {
        "status": "healthy" if database == "ok" else "degraded",
        "app": settings.APP_NAME,
        "database": database,
        "storage_backend": settings.STORAGE_BACKEND,
        "delivery_backend": settings.DELIVERY_BACKEND,
        "filing_backend": settings.FILING_BACKEND,
    }
