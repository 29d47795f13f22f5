# app/routers/stats.py
"""Visitor/student statistics for the admin dashboard."""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.database import get_db
from app.schemas.stats import DailyStatsOut, SystemStatsOut
from app.services.reporting_service import daily_stats, system_stats

router = APIRouter()


@router.get("/stats/daily", response_model=DailyStatsOut, summary="Today's entry/exit counts")
@router.get("/stats/today", response_model=DailyStatsOut, include_in_schema=False)
def get_daily_stats(target_date: Optional[date] = None, db: Session = Depends(get_db)):
    """
    Per kind: entered today, exited today, pending approval, approved but
    not yet out, and currently inside (not date-scoped).
    """
    return daily_stats(db, target_date)


@router.get("/stats/system", response_model=SystemStatsOut, summary="All-time record and user totals")
def get_system_stats(db: Session = Depends(get_db)):
    return system_stats(db)
