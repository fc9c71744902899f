"""
Shift statistics

recompute() rebuilds a worker's cached totals from all of their completed
shifts. summarize() produces the aggregate figures of the manager dashboard.
"""

from typing import Dict, Iterable, List, Optional
import uuid

from pydantic import BaseModel
import structlog

from careshift.core.timeutils import round2
from careshift.models.shift import Shift, ShiftStatus
from careshift.models.user import User
from careshift.repositories.shifts import ShiftStore
from careshift.repositories.users import UserStore

logger = structlog.get_logger(__name__)


class DailyShiftCounts(BaseModel):
    date: str
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    scheduled: int = 0
    missed: int = 0


class ShiftSummary(BaseModel):
    total_shifts: int
    completed: int
    in_progress: int
    scheduled: int
    missed: int
    total_hours: float
    average_hours: float
    by_date: List[DailyShiftCounts]


_STATUS_FIELDS = {
    ShiftStatus.COMPLETED: "completed",
    ShiftStatus.IN_PROGRESS: "in_progress",
    ShiftStatus.SCHEDULED: "scheduled",
    ShiftStatus.MISSED: "missed",
}


class StatisticsAggregator:
    def __init__(self, shifts: ShiftStore, users: UserStore):
        self.shifts = shifts
        self.users = users

    def recompute(self, user_id: uuid.UUID) -> Optional[User]:
        """Rewrite total_shifts and average_hours from every completed shift"""
        completed = self.shifts.list_completed_shifts(user_id)
        count = len(completed)
        if count == 0:
            return None

        average = round2(sum(s.total_hours for s in completed) / count)
        user = self.users.update_user_stats(
            user_id, total_shifts=count, average_hours=average
        )
        logger.debug(f"Statistics for {user_id}: {count} shifts, {average}h average")
        return user


def summarize(shifts: Iterable[Shift]) -> ShiftSummary:
    """Aggregate figures over a set of shifts, with a per-day breakdown"""
    shifts = list(shifts)
    by_date: Dict[str, DailyShiftCounts] = {}
    totals = {field: 0 for field in _STATUS_FIELDS.values()}
    total_hours = 0.0

    for shift in shifts:
        key = shift.date.strftime("%Y-%m-%d")
        day = by_date.setdefault(key, DailyShiftCounts(date=key))
        day.total += 1

        field = _STATUS_FIELDS[shift.status]
        setattr(day, field, getattr(day, field) + 1)
        totals[field] += 1
        total_hours += shift.total_hours

    return ShiftSummary(
        total_shifts=len(shifts),
        total_hours=round2(total_hours),
        average_hours=round2(total_hours / len(shifts)) if shifts else 0.0,
        by_date=[by_date[key] for key in sorted(by_date)],
        **totals,
    )
