from fastapi import APIRouter

from shift_scheduler.api.employees import employees_router
from shift_scheduler.api.holidays import calendar_router
from shift_scheduler.api.shifts import shifts_router
from shift_scheduler.api.statistics import statistics_router

api_router = APIRouter()
api_router.include_router(shifts_router)
api_router.include_router(calendar_router)
api_router.include_router(statistics_router)
api_router.include_router(employees_router)
