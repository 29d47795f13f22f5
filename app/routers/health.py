# app/routers/health.py
"""
System health check endpoint.
Returns status of backend + DB + connected notification listeners.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
from app.database import get_db
from app.services.notification_service import DIRECTOR, GUARD, notification_manager
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
def health_check(db: Session = Depends(get_db)):
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "database": "unknown",
        "listeners": {
            DIRECTOR: notification_manager.listener_count(DIRECTOR),
            GUARD: notification_manager.listener_count(GUARD),
        },
    }

    try:
        db.execute(text("SELECT 1"))
        result["database"] = "ok"
    except Exception as e:
        result["database"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
