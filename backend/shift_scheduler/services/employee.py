# ruff: noqa: TC003
from __future__ import annotations

import uuid
from typing import Protocol, runtime_checkable

from pydantic import BaseModel

from shift_scheduler.models.enums import UserRole


class EmployeeInfo(BaseModel):
    """User metadata from the identity directory."""

    id: uuid.UUID
    full_name: str
    username: str
    role: UserRole = UserRole.EMPLOYEE
    is_active: bool = True


@runtime_checkable
class EmployeeService(Protocol):
    """Interface for the identity directory."""

    async def get_employee(self, employee_id: uuid.UUID) -> EmployeeInfo | None:
        """Fetch user metadata. Returns None if not found."""
        ...

    async def list_employees(self) -> list[EmployeeInfo]:
        """List all known users."""
        ...


class InMemoryEmployeeService:
    """In-memory stub implementation for development."""

    def __init__(self) -> None:
        self._employees: dict[uuid.UUID, EmployeeInfo] = {}

    def seed(self, employee: EmployeeInfo) -> None:
        """Seed a user for testing."""
        self._employees[employee.id] = employee

    async def get_employee(self, employee_id: uuid.UUID) -> EmployeeInfo | None:
        """Fetch user metadata. Returns None if not found."""
        return self._employees.get(employee_id)

    async def list_employees(self) -> list[EmployeeInfo]:
        """List all known users."""
        return list(self._employees.values())


async def list_active_employees(service: EmployeeService) -> list[EmployeeInfo]:
    """Active users with the employee role, ordered by full name."""
    employees = await service.list_employees()
    return sorted(
        (e for e in employees if e.role == UserRole.EMPLOYEE and e.is_active),
        key=lambda e: e.full_name,
    )


_employee_service: EmployeeService = InMemoryEmployeeService()


def get_employee_service() -> EmployeeService:
    """FastAPI dependency for the identity directory."""
    return _employee_service


def set_employee_service(service: EmployeeService) -> None:
    """Override the service (for testing or production wiring)."""
    global _employee_service
    _employee_service = service
