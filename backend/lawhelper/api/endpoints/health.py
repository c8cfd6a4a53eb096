"""
Readiness check – verifies the database and reports how the AI gateway and
upload archive are configured.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from lawhelper.core.config import settings
from lawhelper.core.logger import logger
from lawhelper.db.database import get_db

router = APIRouter()


def _check_database(db: Session) -> tuple[str, str]:
    """Returns (status, detail). Status is 'ok' or 'error'."""
    try:
        db.execute(text("SELECT 1"))
        return "ok", "Database reachable"
    except SQLAlchemyError as e:
        logger.error("readiness: database check failed: %s", e)
        return "error", "Database unreachable"


@router.get("/ready")
def readiness(db: Session = Depends(get_db)):
    db_status, db_detail = _check_database(db)
    body = {
        "status": "ready" if db_status == "ok" else "degraded",
        "checks": {
            "database": {"status": db_status, "detail": db_detail},
            "bedrock": {"status": "configured", "model": settings.BEDROCK_MODEL_ID, "region": settings.AWS_REGION},
            "uploadArchive": {
                "status": "enabled" if settings.UPLOAD_ARCHIVE_ENABLED else "disabled",
                "bucket": settings.S3_BUCKET_NAME if settings.UPLOAD_ARCHIVE_ENABLED else None,
            },
        },
    }
    return JSONResponse(status_code=200 if db_status == "ok" else 503, content=body)
