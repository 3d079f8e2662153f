from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from app.employees.models import EmployeeType
from app.payrolls.models import PayrollStatus


class PayrollProcessRequest(BaseModel):
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900, le=9999)
    employee_ids: Optional[List[UUID]] = None


class BulkPayRequest(BaseModel):
    payroll_ids: List[UUID] = []


class PayrollEmployee(BaseModel):
    id: UUID
    name: str
    email: str
    designation: str
    employee_type: EmployeeType

    class Config:
        from_attributes = True


class PayrollResponse(BaseModel):
    id: UUID
    employee_id: UUID
    month: int
    year: int
    basic_salary: Decimal
    house_rent: Decimal
    medical: Decimal
    transport: Decimal
    education: Decimal
    special: Decimal
    tax: Decimal
    provident_fund: Decimal
    insurance: Decimal
    loan: Decimal
    other: Decimal
    gross_salary: Decimal
    net_salary: Decimal
    status: PayrollStatus
    paid_at: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True


class PayrollWithEmployee(PayrollResponse):
    employee: PayrollEmployee


class PayrollOutcome(BaseModel):
    employee_id: UUID
    employee_name: str
    message: str


class PayrollProcessResult(BaseModel):
    processed: List[PayrollResponse]
    errors: List[PayrollOutcome]
    processed_count: int
    error_count: int


class BulkPayResult(BaseModel):
    updated_count: int


class PeriodCounts(BaseModel):
    total: int
    paid: int
    pending: int


class PeriodTotals(BaseModel):
    basic_salary: Decimal
    total_allowances: Decimal
    total_deductions: Decimal
    gross_salary: Decimal
    net_salary: Decimal


class Period(BaseModel):
    month: Optional[int] = None
    year: int


class TypeTotals(BaseModel):
    count: int
    total_net_salary: Decimal


class PeriodByType(BaseModel):
    teachers: TypeTotals
    officers: TypeTotals
    staff: TypeTotals


class PayrollSummary(BaseModel):
    period: Period
    counts: PeriodCounts
    totals: PeriodTotals
    by_type: PeriodByType
