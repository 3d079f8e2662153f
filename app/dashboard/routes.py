from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date
from typing import List
from app.core.config import settings
from app.core.database import get_db
from app.core.schemas import ApiResponse
from app.dashboard.schemas import DashboardStats, DepartmentSummary, EmployeeDistribution, SalaryTrend
from app.dashboard.service import DashboardService
from app.payrolls.schemas import PayrollWithEmployee

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=ApiResponse[DashboardStats])
async def get_dashboard_stats(db: Session = Depends(get_db)):
    """Employee counts and this month's payroll figures."""
    dashboard_service = DashboardService(db)
    return ApiResponse[DashboardStats](data=dashboard_service.stats(date.today()))


@router.get("/recent-payrolls", response_model=ApiResponse[List[PayrollWithEmployee]])
async def get_recent_payrolls(
    limit: int = Query(settings.recent_payrolls_limit, ge=1),
    db: Session = Depends(get_db)
):
    dashboard_service = DashboardService(db)
    payrolls = dashboard_service.recent_payrolls(limit)
    return ApiResponse[List[PayrollWithEmployee]](
        data=[PayrollWithEmployee.model_validate(payroll) for payroll in payrolls]
    )


@router.get("/salary-trends", response_model=ApiResponse[List[SalaryTrend]])
async def get_salary_trends(db: Session = Depends(get_db)):
    """Payroll totals for the last months, oldest first."""
    dashboard_service = DashboardService(db)
    return ApiResponse[List[SalaryTrend]](data=dashboard_service.salary_trends(date.today()))


@router.get("/employee-distribution", response_model=ApiResponse[List[EmployeeDistribution]])
async def get_employee_distribution(db: Session = Depends(get_db)):
    dashboard_service = DashboardService(db)
    return ApiResponse[List[EmployeeDistribution]](data=dashboard_service.employee_distribution())


@router.get("/department-summary", response_model=ApiResponse[List[DepartmentSummary]])
async def get_department_summary(db: Session = Depends(get_db)):
    """Teachers and summed basic salary per department."""
    dashboard_service = DashboardService(db)
    return ApiResponse[List[DepartmentSummary]](data=dashboard_service.department_summary())
