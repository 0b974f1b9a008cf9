# ruff: noqa: TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from shift_scheduler.api.deps import AuthDep, ManagerDep
from shift_scheduler.exceptions import AppError
from shift_scheduler.schemas.employee import EmployeeListResponse, EmployeeResponse, UpsertEmployeeRequest
from shift_scheduler.services.employee import EmployeeInfo, get_employee_service

employees_router = APIRouter(
    prefix="/employees",
    tags=["employees"],
)


def _build_employee_response(employee: EmployeeInfo) -> EmployeeResponse:
    return EmployeeResponse(
        id=employee.id,
        full_name=employee.full_name,
        username=employee.username,
        role=employee.role,
        is_active=employee.is_active,
    )


@employees_router.put(
    "/{employee_id}",
    response_model=EmployeeResponse,
)
async def upsert_employee(
    employee_id: uuid.UUID,
    payload: UpsertEmployeeRequest,
    auth: ManagerDep,
) -> EmployeeResponse:
    """Create or update a user in the stub directory (manager only)."""
    svc = get_employee_service()
    employee = EmployeeInfo(
        id=employee_id,
        full_name=payload.full_name,
        username=payload.username,
        role=payload.role,
        is_active=payload.is_active,
    )
    svc.seed(employee)  # ty: ignore[unresolved-attribute]
    return _build_employee_response(employee)


@employees_router.get(
    "/{employee_id}",
    response_model=EmployeeResponse,
)
async def get_employee(
    employee_id: uuid.UUID,
    auth: AuthDep,
) -> EmployeeResponse:
    """Get a user from the stub directory."""
    employee = await get_employee_service().get_employee(employee_id)
    if employee is None:
        raise AppError("Employee not found", status_code=404)
    return _build_employee_response(employee)


@employees_router.get(
    "",
    response_model=EmployeeListResponse,
)
async def list_employees(
    auth: AuthDep,
) -> EmployeeListResponse:
    """List all users in the stub directory."""
    employees = await get_employee_service().list_employees()
    items = [_build_employee_response(e) for e in employees]
    return EmployeeListResponse(items=items, total=len(items))
