import logging
from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from coursedesk.core.deps import get_db, get_now
from coursedesk.models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/api/test-db")
def test_db(
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    try:
        result = db.query(User.id).limit(1).all()
    except SQLAlchemyError as exc:
        logger.error("database connectivity check failed: %s", exc)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": str(exc),
                "hint": "Make sure DATABASE_URL is set and the schema exists (alembic upgrade head)",
            },
        )

    return {
        "success": True,
        "message": "Database connected successfully!",
        "user_count": len(result),
        "timestamp": now.isoformat(),
    }
