import calendar
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload
from app.core.config import settings
from app.core.exceptions import ValidationError
from app.core.service_base import BaseService
from app.employees.models import Employee, EmployeeType
from app.payrolls.calculator import SalaryComponents, net_salary_of, total_allowances, total_deductions
from app.payrolls.models import Payroll
from app.payrolls.service import PayrollService
from app.reports.aggregation import GroupTotals, aggregate, aggregate_by_month, average, overall

logger = logging.getLogger(__name__)

ALLOWANCES = ("total_allowances", lambda payroll: total_allowances(SalaryComponents.from_source(payroll)))
DEDUCTIONS = ("total_deductions", lambda payroll: total_deductions(SalaryComponents.from_source(payroll)))

SALARY_FIELDS = ("basic_salary", "gross_salary", "net_salary")
FULL_FIELDS = ("basic_salary", ALLOWANCES, DEDUCTIONS, "gross_salary", "net_salary")


def _totals_row(group: GroupTotals) -> Dict[str, Any]:
    """Report row columns for one group: count plus every summed field."""
    row = {"count": group.count}
    for name, value in group.totals.items():
        row[f"total_{name}" if not name.startswith("total_") else name] = value
    return row


class ReportService(BaseService):
    """Salary reports over payroll snapshots and over the live employee roster."""

    def __init__(self, db: Session):
        super().__init__(db)

    def _require_period(self, month: Optional[int], year: Optional[int]) -> None:
        if month is None or year is None:
            raise ValidationError(
                detail="Month and year are required",
                field="month" if month is None else "year",
                value=None
            )

    def _period_payrolls(self, month: Optional[int], year: Optional[int], *conditions, options=()) -> List[Payroll]:
        self._require_period(month, year)
        query = self.db.query(Payroll).join(Payroll.employee).options(joinedload(Payroll.employee), *options)
        # Groups appear in the order of their first employee by name
        payrolls = query.filter(
            Payroll.month == month, Payroll.year == year, *conditions
        ).order_by(Employee.name, Payroll.id).all()
        logger.debug(f"Loaded {len(payrolls)} payrolls for {year}-{month:02d} report")
        return payrolls

    def _teacher_payrolls(self, month: Optional[int], year: Optional[int]) -> List[Payroll]:
        return self._period_payrolls(
            month,
            year,
            Payroll.employee.has(Employee.employee_type == EmployeeType.TEACHER),
            options=(joinedload(Payroll.employee).joinedload(Employee.teacher),)
        )

    def salary_by_type(self, month: Optional[int], year: Optional[int]) -> Dict:
        payrolls = self._period_payrolls(month, year)
        groups = aggregate(payrolls, lambda payroll: payroll.employee.employee_type, FULL_FIELDS)

        return {
            "period": {"month": month, "year": year},
            "report": [
                {"employee_type": employee_type, **_totals_row(group)}
                for employee_type, group in groups.items()
            ],
        }

    def department_report(self, month: Optional[int], year: Optional[int]) -> Dict:
        """Teacher payrolls of one period grouped by department."""
        payrolls = self._teacher_payrolls(month, year)
        groups = aggregate(
            payrolls,
            lambda payroll: payroll.employee.teacher.department if payroll.employee.teacher else None,
            SALARY_FIELDS
        )

        return {
            "period": {"month": month, "year": year},
            "report": [{"department": department, **_totals_row(group)} for department, group in groups.items()],
        }

    def faculty_report(self, month: Optional[int], year: Optional[int]) -> Dict:
        """Teacher payrolls of one period grouped by faculty."""
        payrolls = self._teacher_payrolls(month, year)
        groups = aggregate(
            payrolls,
            lambda payroll: payroll.employee.teacher.faculty if payroll.employee.teacher else None,
            SALARY_FIELDS
        )

        return {
            "period": {"month": month, "year": year},
            "report": [{"faculty": faculty, **_totals_row(group)} for faculty, group in groups.items()],
        }

    def designation_report(self, month: Optional[int], year: Optional[int]) -> Dict:
        payrolls = self._period_payrolls(month, year)
        groups = aggregate(payrolls, lambda payroll: payroll.employee.designation, SALARY_FIELDS)

        return {
            "period": {"month": month, "year": year},
            "report": [
                {
                    "designation": designation,
                    **_totals_row(group),
                    "average_salary": average(group["net_salary"], group.count),
                }
                for designation, group in groups.items()
            ],
        }

    def university_total(self, month: Optional[int], year: Optional[int]) -> Dict:
        payrolls = self._period_payrolls(month, year)
        return {
            "period": {"month": month, "year": year},
            **_totals_row(overall(payrolls, FULL_FIELDS)),
        }

    def monthly_summary(self, year: Optional[int]) -> Dict:
        """Twelve monthly rows for a year, months without payrolls are zero."""
        if year is None:
            raise ValidationError(detail="Year is required", field="year", value=None)

        payrolls = self.db.query(Payroll).filter(Payroll.year == year).all()
        months = aggregate_by_month(payrolls, SALARY_FIELDS)

        return {
            "period": {"year": year},
            "months": [
                {"month": month, "month_name": calendar.month_name[month], **_totals_row(group)}
                for month, group in months.items()
            ],
            "yearly_total": _totals_row(overall(payrolls, SALARY_FIELDS)),
        }

    def salary_slip(self, employee_id: UUID, month: Optional[int], year: Optional[int]) -> Payroll:
        self._require_period(month, year)
        return PayrollService(self.db).get_salary_slip(employee_id, month, year)

    def employee_history(self, employee_id: UUID, limit: int = settings.salary_history_limit):
        return PayrollService(self.db).get_employee_history(employee_id, limit)

    def employee_type_roster(self) -> List[Dict]:
        """All employees by type with the sum of their current net salary."""
        employees = self.db.query(Employee).order_by(Employee.created_at.asc()).all()
        groups = aggregate(employees, lambda employee: employee.employee_type, [("salary", net_salary_of)])
        return [
            {"employee_type": employee_type, "count": group.count, "total_salary": group["salary"]}
            for employee_type, group in groups.items()
        ]

    def designation_roster(self) -> List[Dict]:
        """All employees by designation with the sum of their current net salary."""
        employees = self.db.query(Employee).order_by(Employee.created_at.asc()).all()
        groups = aggregate(employees, lambda employee: employee.designation, [("salary", net_salary_of)])
        return [
            {"designation": designation, "count": group.count, "total_salary": group["salary"]}
            for designation, group in groups.items()
        ]

