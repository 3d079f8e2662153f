from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID
import csv
import io
from app.core.config import settings
from app.core.database import get_db
from app.core.pagination import Pagination
from app.core.schemas import ApiResponse, MessageResponse, PaginatedResponse
from app.payrolls.filters import PayrollFilters
from app.payrolls.models import PayrollStatus
from app.payrolls.schemas import (
    BulkPayRequest,
    BulkPayResult,
    PayrollProcessRequest,
    PayrollProcessResult,
    PayrollOutcome,
    PayrollResponse,
    PayrollSummary,
    PayrollWithEmployee
)
from app.payrolls.service import PayrollService

router = APIRouter(prefix="/payroll", tags=["payroll"])


@router.get("/", response_model=PaginatedResponse[PayrollWithEmployee])
async def list_payrolls(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    status_filter: Optional[PayrollStatus] = Query(None, alias="status"),
    employee_id: Optional[UUID] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1),
    db: Session = Depends(get_db)
):
    """Get payroll records with filters and pagination."""
    payroll_service = PayrollService(db)
    pagination = Pagination(page=page, limit=limit)

    payrolls, total = payroll_service.list_payrolls(
        PayrollFilters(month=month, year=year, status=status_filter, employee_id=employee_id),
        pagination
    )

    return PaginatedResponse[PayrollWithEmployee](
        data=[PayrollWithEmployee.model_validate(payroll) for payroll in payrolls],
        pagination=pagination.meta(total)
    )


@router.get("/summary", response_model=ApiResponse[PayrollSummary])
async def get_payroll_summary(
    month: int = Query(..., ge=1, le=12),
    year: int = Query(...),
    db: Session = Depends(get_db)
):
    """Counts and salary totals for one period."""
    payroll_service = PayrollService(db)
    return ApiResponse[PayrollSummary](data=payroll_service.get_period_summary(month, year))


@router.get("/export/csv")
async def export_payrolls_csv(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None),
    status_filter: Optional[PayrollStatus] = Query(None, alias="status"),
    employee_id: Optional[UUID] = Query(None),
    db: Session = Depends(get_db)
):
    """Export payrolls to CSV file."""
    payroll_service = PayrollService(db)
    filters = PayrollFilters(month=month, year=year, status=status_filter, employee_id=employee_id)

    total = payroll_service.list_payrolls(filters, Pagination(page=1, limit=1))[1]
    payrolls = payroll_service.list_payrolls(filters, Pagination(page=1, limit=max(total, 1)))[0]

    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow([
        'Employee ID', 'Employee Name', 'Employee Email', 'Employee Type', 'Designation',
        'Month', 'Year', 'Basic Salary', 'House Rent', 'Medical', 'Transport', 'Education',
        'Special', 'Tax', 'Provident Fund', 'Insurance', 'Loan', 'Other',
        'Gross Salary', 'Net Salary', 'Status', 'Paid At'
    ])

    for payroll in payrolls:
        writer.writerow([
            str(payroll.employee_id),
            payroll.employee.name,
            payroll.employee.email,
            payroll.employee.employee_type.value,
            payroll.employee.designation,
            payroll.month,
            payroll.year,
            payroll.basic_salary,
            payroll.house_rent,
            payroll.medical,
            payroll.transport,
            payroll.education,
            payroll.special,
            payroll.tax,
            payroll.provident_fund,
            payroll.insurance,
            payroll.loan,
            payroll.other,
            payroll.gross_salary,
            payroll.net_salary,
            payroll.status.value,
            payroll.paid_at.isoformat() if payroll.paid_at else ''
        ])

    csv_content = output.getvalue()
    output.close()

    period = "_".join(f"{part:02d}" for part in (year, month) if part is not None) or "all"
    filename = f"payrolls_{period}.csv"

    return Response(
        content=csv_content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )


@router.get("/{payroll_id}", response_model=ApiResponse[PayrollWithEmployee])
async def get_payroll(
    payroll_id: UUID,
    db: Session = Depends(get_db)
):
    """Get payroll by ID."""
    payroll_service = PayrollService(db)
    payroll = payroll_service.get_payroll(payroll_id)
    return ApiResponse[PayrollWithEmployee](data=PayrollWithEmployee.model_validate(payroll))


@router.post("/process", response_model=ApiResponse[PayrollProcessResult], status_code=status.HTTP_201_CREATED)
async def process_payroll(
    process_request: PayrollProcessRequest,
    db: Session = Depends(get_db)
):
    """Process payroll for every active employee, or the listed ones, for a month."""
    payroll_service = PayrollService(db)
    result = payroll_service.process_period(
        month=process_request.month,
        year=process_request.year,
        employee_ids=process_request.employee_ids
    )

    return ApiResponse[PayrollProcessResult](
        message=f"Payroll processed for {len(result.processed)} employees",
        data=PayrollProcessResult(
            processed=[PayrollResponse.model_validate(payroll) for payroll in result.processed],
            errors=[
                PayrollOutcome(
                    employee_id=outcome.employee_id,
                    employee_name=outcome.employee_name,
                    message=outcome.message
                )
                for outcome in result.errors
            ],
            processed_count=len(result.processed),
            error_count=len(result.errors)
        )
    )


@router.put("/bulk-pay", response_model=ApiResponse[BulkPayResult])
async def bulk_mark_as_paid(
    bulk_request: BulkPayRequest,
    db: Session = Depends(get_db)
):
    """Mark the pending payrolls among the given ids as paid."""
    payroll_service = PayrollService(db)
    updated = payroll_service.bulk_mark_as_paid(bulk_request.payroll_ids)
    return ApiResponse[BulkPayResult](
        message=f"{updated} payroll records marked as paid",
        data=BulkPayResult(updated_count=updated)
    )


@router.put("/{payroll_id}/pay", response_model=ApiResponse[PayrollResponse])
async def mark_payroll_paid(
    payroll_id: UUID,
    db: Session = Depends(get_db)
):
    """Mark a payroll as paid."""
    payroll_service = PayrollService(db)
    payroll = payroll_service.mark_as_paid(payroll_id)
    return ApiResponse[PayrollResponse](
        message="Payroll marked as paid",
        data=PayrollResponse.model_validate(payroll)
    )


@router.delete("/{payroll_id}", response_model=MessageResponse)
async def delete_payroll(
    payroll_id: UUID,
    db: Session = Depends(get_db)
):
    """Delete a payroll record."""
    payroll_service = PayrollService(db)
    payroll_service.delete_payroll(payroll_id)
    return MessageResponse(message="Payroll record deleted successfully")
