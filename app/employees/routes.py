from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
from app.core.config import settings
from app.core.database import get_db
from app.core.pagination import Pagination
from app.core.schemas import ApiResponse, MessageResponse, PaginatedResponse
from app.employees.filters import EmployeeFilters
from app.employees.models import EmployeeStatus, EmployeeType
from app.employees.schemas import (
    EmployeeCreate,
    EmployeeUpdate,
    EmployeeResponse,
    EmployeeDetail,
    EmployeePayrollSummary,
    EmployeeStats
)
from app.employees.service import EmployeeService

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("/", response_model=PaginatedResponse[EmployeeResponse])
async def list_employees(
    type: Optional[EmployeeType] = Query(None, description="Filter by employee type"),
    status_filter: Optional[EmployeeStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Matches name, email or phone"),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1),
    db: Session = Depends(get_db)
):
    """Get employees with filters and pagination."""
    employee_service = EmployeeService(db)
    pagination = Pagination(page=page, limit=limit)

    employees, total = employee_service.list_employees(
        EmployeeFilters(employee_type=type, status=status_filter, search=search),
        pagination
    )

    return PaginatedResponse[EmployeeResponse](
        data=[EmployeeResponse.model_validate(employee) for employee in employees],
        pagination=pagination.meta(total)
    )


@router.get("/stats", response_model=ApiResponse[EmployeeStats])
async def get_employee_stats(db: Session = Depends(get_db)):
    """Employee counts by type and status."""
    employee_service = EmployeeService(db)
    return ApiResponse[EmployeeStats](data=employee_service.employee_stats())


@router.get("/{employee_id}", response_model=ApiResponse[EmployeeDetail])
async def get_employee(
    employee_id: UUID,
    db: Session = Depends(get_db)
):
    """Get employee by ID with role details and recent payrolls."""
    employee_service = EmployeeService(db)
    employee = employee_service.get_employee(employee_id)

    detail = EmployeeDetail.model_validate(employee)
    detail.recent_payrolls = [
        EmployeePayrollSummary.model_validate(payroll)
        for payroll in employee_service.get_recent_payrolls(employee.id, settings.recent_payrolls_limit)
    ]
    return ApiResponse[EmployeeDetail](data=detail)


@router.post("/", response_model=ApiResponse[EmployeeResponse], status_code=status.HTTP_201_CREATED)
async def create_employee(
    employee_data: EmployeeCreate,
    db: Session = Depends(get_db)
):
    """Create a new employee with its role details."""
    employee_service = EmployeeService(db)
    employee = employee_service.create_employee(employee_data)
    return ApiResponse[EmployeeResponse](
        message="Employee created successfully",
        data=EmployeeResponse.model_validate(employee)
    )


@router.put("/{employee_id}", response_model=ApiResponse[EmployeeResponse])
async def update_employee(
    employee_id: UUID,
    employee_data: EmployeeUpdate,
    db: Session = Depends(get_db)
):
    """Update employee information."""
    employee_service = EmployeeService(db)
    employee = employee_service.update_employee(employee_id, employee_data)
    return ApiResponse[EmployeeResponse](
        message="Employee updated successfully",
        data=EmployeeResponse.model_validate(employee)
    )


@router.delete("/{employee_id}", response_model=MessageResponse)
async def delete_employee(
    employee_id: UUID,
    db: Session = Depends(get_db)
):
    """Delete an employee and everything attached to it."""
    employee_service = EmployeeService(db)
    employee_service.delete_employee(employee_id)
    return MessageResponse(message="Employee deleted successfully")
