from pydantic import BaseModel
from typing import Generic, List, TypeVar
from decimal import Decimal
from app.employees.models import EmployeeType
from app.payrolls.schemas import Period, PayrollEmployee, PayrollResponse

RowT = TypeVar("RowT")


class SalaryTotals(BaseModel):
    count: int
    total_basic_salary: Decimal
    total_gross_salary: Decimal
    total_net_salary: Decimal


class FullSalaryTotals(SalaryTotals):
    total_allowances: Decimal
    total_deductions: Decimal


class EmployeeTypeRow(FullSalaryTotals):
    employee_type: EmployeeType


class DepartmentRow(SalaryTotals):
    department: str


class FacultyRow(SalaryTotals):
    faculty: str


class DesignationRow(SalaryTotals):
    designation: str
    average_salary: Decimal


class PeriodReport(BaseModel, Generic[RowT]):
    period: Period
    report: List[RowT]


class UniversityTotal(FullSalaryTotals):
    period: Period


class MonthRow(SalaryTotals):
    month: int
    month_name: str


class MonthlySummary(BaseModel):
    period: Period
    months: List[MonthRow]
    yearly_total: SalaryTotals


class SalaryHistory(BaseModel):
    employee: PayrollEmployee
    salary_history: List[PayrollResponse]


class EmployeeTypeRosterRow(BaseModel):
    employee_type: EmployeeType
    count: int
    total_salary: Decimal


class DesignationRosterRow(BaseModel):
    designation: str
    count: int
    total_salary: Decimal
