from sqlmodel import SQLModel

from shift_scheduler.models.base import TimestampMixin, UUIDBase
from shift_scheduler.models.enums import HolidayCategory, OutcomeCode, ShiftStatus, UserRole
from shift_scheduler.models.holiday import HolidayCacheEntry
from shift_scheduler.models.shift import ShiftRecord
from shift_scheduler.models.statistic import ShiftStatistic

__all__ = [
    "HolidayCacheEntry",
    "HolidayCategory",
    "OutcomeCode",
    "SQLModel",
    "ShiftRecord",
    "ShiftStatistic",
    "ShiftStatus",
    "TimestampMixin",
    "UUIDBase",
    "UserRole",
]
