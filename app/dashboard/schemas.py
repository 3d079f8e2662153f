from pydantic import BaseModel
from decimal import Decimal
from app.employees.schemas import EmployeeStats


class CurrentMonthPayroll(BaseModel):
    month: int
    year: int
    total: int
    paid: int
    pending: int
    total_gross_salary: Decimal
    total_net_salary: Decimal


class PayrollStats(BaseModel):
    current_month: CurrentMonthPayroll


class DashboardStats(BaseModel):
    employees: EmployeeStats
    payroll: PayrollStats


class SalaryTrend(BaseModel):
    month: int
    year: int
    month_name: str
    total_gross: Decimal
    total_net: Decimal
    count: int


class EmployeeDistribution(BaseModel):
    type: str
    count: int


class DepartmentSummary(BaseModel):
    department: str
    count: int
    total_salary: Decimal
