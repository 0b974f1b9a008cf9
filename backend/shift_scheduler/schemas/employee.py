# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel, Field

from shift_scheduler.models.enums import UserRole


class UpsertEmployeeRequest(BaseModel):
    """Request body for upserting a user in the stub directory."""

    full_name: str = Field(min_length=1, max_length=100)
    username: str = Field(min_length=1, max_length=100)
    role: UserRole = UserRole.EMPLOYEE
    is_active: bool = True


class EmployeeResponse(BaseModel):
    """Response schema for a directory user."""

    id: uuid.UUID
    full_name: str
    username: str
    role: UserRole
    is_active: bool


class EmployeeListResponse(BaseModel):
    """List of directory users."""

    items: list[EmployeeResponse]
    total: int
