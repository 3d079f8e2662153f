"""
Salary calculation shared by payroll processing and the reports.

Gross salary is the basic salary plus every allowance; net salary is gross
minus every deduction. Net salary is not floored, deductions larger than gross
pay (an outstanding loan, for instance) yield a negative amount.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict

from app.employees.models import ALLOWANCE_FIELDS, DEDUCTION_FIELDS

ZERO = Decimal("0")


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() keeps floats such as 0.1 from dragging in binary noise
    return Decimal(str(value))


@dataclass(frozen=True)
class SalaryComponents:
    basic_salary: Decimal = ZERO
    house_rent: Decimal = ZERO
    medical: Decimal = ZERO
    transport: Decimal = ZERO
    education: Decimal = ZERO
    special: Decimal = ZERO
    tax: Decimal = ZERO
    provident_fund: Decimal = ZERO
    insurance: Decimal = ZERO
    loan: Decimal = ZERO
    other: Decimal = ZERO

    @classmethod
    def from_source(cls, source: Any) -> "SalaryComponents":
        """Read the eleven compensation fields off an Employee, a Payroll or a dict."""
        names = ("basic_salary",) + ALLOWANCE_FIELDS + DEDUCTION_FIELDS
        if isinstance(source, dict):
            values = {name: to_decimal(source.get(name)) for name in names}
        else:
            values = {name: to_decimal(getattr(source, name, None)) for name in names}
        return cls(**values)

    def snapshot(self) -> Dict[str, Decimal]:
        return {
            "basic_salary": self.basic_salary,
            **{name: getattr(self, name) for name in ALLOWANCE_FIELDS},
            **{name: getattr(self, name) for name in DEDUCTION_FIELDS},
        }


@dataclass(frozen=True)
class SalaryBreakdown:
    total_allowances: Decimal
    total_deductions: Decimal
    gross_salary: Decimal
    net_salary: Decimal


def total_allowances(components: SalaryComponents) -> Decimal:
    return sum((getattr(components, name) for name in ALLOWANCE_FIELDS), ZERO)


def total_deductions(components: SalaryComponents) -> Decimal:
    return sum((getattr(components, name) for name in DEDUCTION_FIELDS), ZERO)


def calculate_salary(components: SalaryComponents) -> SalaryBreakdown:
    allowances = total_allowances(components)
    deductions = total_deductions(components)
    gross_salary = components.basic_salary + allowances
    return SalaryBreakdown(
        total_allowances=allowances,
        total_deductions=deductions,
        gross_salary=gross_salary,
        net_salary=gross_salary - deductions,
    )


def net_salary_of(source: Any) -> Decimal:
    """Net salary from an object's current compensation fields."""
    return calculate_salary(SalaryComponents.from_source(source)).net_salary
