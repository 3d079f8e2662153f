from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from app.core.config import settings
from app.core.database import get_db
from app.core.schemas import ApiResponse
from app.payrolls.schemas import PayrollEmployee, PayrollResponse, PayrollWithEmployee
from app.reports.schemas import (
    DepartmentRow,
    DesignationRosterRow,
    DesignationRow,
    EmployeeTypeRosterRow,
    EmployeeTypeRow,
    FacultyRow,
    MonthlySummary,
    PeriodReport,
    SalaryHistory,
    UniversityTotal
)
from app.reports.service import ReportService

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/salary-by-type", response_model=ApiResponse[PeriodReport[EmployeeTypeRow]])
async def salary_report_by_type(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """Payroll totals per employee type for a period."""
    report_service = ReportService(db)
    return ApiResponse[PeriodReport[EmployeeTypeRow]](data=report_service.salary_by_type(month, year))


@router.get("/department", response_model=ApiResponse[PeriodReport[DepartmentRow]])
async def department_report(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """Teacher payroll totals per department for a period."""
    report_service = ReportService(db)
    return ApiResponse[PeriodReport[DepartmentRow]](data=report_service.department_report(month, year))


@router.get("/faculty", response_model=ApiResponse[PeriodReport[FacultyRow]])
async def faculty_report(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    report_service = ReportService(db)
    return ApiResponse[PeriodReport[FacultyRow]](data=report_service.faculty_report(month, year))


@router.get("/designation", response_model=ApiResponse[PeriodReport[DesignationRow]])
async def designation_report(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """Payroll totals and average net salary per designation."""
    report_service = ReportService(db)
    return ApiResponse[PeriodReport[DesignationRow]](data=report_service.designation_report(month, year))


@router.get("/university-total", response_model=ApiResponse[UniversityTotal])
async def university_total(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    report_service = ReportService(db)
    return ApiResponse[UniversityTotal](data=report_service.university_total(month, year))


@router.get("/monthly-summary", response_model=ApiResponse[MonthlySummary])
async def monthly_summary(
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """Twelve monthly totals for a year."""
    report_service = ReportService(db)
    return ApiResponse[MonthlySummary](data=report_service.monthly_summary(year))


@router.get("/yearly-comparison", response_model=ApiResponse[MonthlySummary])
async def yearly_comparison(
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """Month-by-month comparison across a year with yearly totals."""
    report_service = ReportService(db)
    return ApiResponse[MonthlySummary](data=report_service.monthly_summary(year))


@router.get("/salary-slip", response_model=ApiResponse[PayrollWithEmployee])
async def salary_slip(
    employee_id: UUID = Query(...),
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db)
):
    """The payroll of one employee for one period."""
    report_service = ReportService(db)
    payroll = report_service.salary_slip(employee_id, month, year)
    return ApiResponse[PayrollWithEmployee](data=PayrollWithEmployee.model_validate(payroll))


@router.get("/employee/{employee_id}/history", response_model=ApiResponse[SalaryHistory])
async def employee_salary_history(
    employee_id: UUID,
    limit: int = Query(settings.salary_history_limit, ge=1),
    db: Session = Depends(get_db)
):
    """An employee's most recent payrolls, newest first."""
    report_service = ReportService(db)
    employee, payrolls = report_service.employee_history(employee_id, limit)
    return ApiResponse[SalaryHistory](
        data=SalaryHistory(
            employee=PayrollEmployee.model_validate(employee),
            salary_history=[PayrollResponse.model_validate(payroll) for payroll in payrolls]
        )
    )


@router.get("/employee-type", response_model=ApiResponse[List[EmployeeTypeRosterRow]])
async def employee_type_roster(db: Session = Depends(get_db)):
    """Employee count and current net salary per type."""
    report_service = ReportService(db)
    return ApiResponse[List[EmployeeTypeRosterRow]](data=report_service.employee_type_roster())


@router.get("/designation-roster", response_model=ApiResponse[List[DesignationRosterRow]])
async def designation_roster(db: Session = Depends(get_db)):
    report_service = ReportService(db)
    return ApiResponse[List[DesignationRosterRow]](data=report_service.designation_roster())
