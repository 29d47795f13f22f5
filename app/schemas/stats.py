# app/schemas/stats.py
from pydantic import BaseModel


class KindStatsOut(BaseModel):
    total_today: int
    exited_today: int
    pending_approval: int
    approved_not_exited: int
    currently_inside: int     # all records not exited, regardless of entry date


class DailyStatsOut(BaseModel):
    date: str
    visitors: KindStatsOut
    students: KindStatsOut


class RecordTotalsOut(BaseModel):
    total: int
    active: int     # not exited


class UserTotalsOut(BaseModel):
    total: int
    by_role: dict[str, int]


class SystemStatsOut(BaseModel):
    users: UserTotalsOut
    visitors: RecordTotalsOut
    students: RecordTotalsOut
