from __future__ import annotations

import enum


class ShiftStatus(enum.StrEnum):
    """Lifecycle of a shift record. Only PENDING is written today."""

    PENDING = "PENDING"


class HolidayCategory(enum.StrEnum):
    """Classification of a cached calendar date."""

    NATIONAL = "NATIONAL"
    WEEKEND = "WEEKEND"


class UserRole(enum.StrEnum):
    """Role of a user as reported by the identity provider."""

    MANAGER = "MANAGER"
    EMPLOYEE = "EMPLOYEE"


class OutcomeCode(enum.StrEnum):
    """Result classification for scheduling operations."""

    OK = "OK"
    REJECTED = "REJECTED"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    ERROR = "ERROR"
