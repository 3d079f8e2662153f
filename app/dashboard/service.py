import calendar
import logging
from datetime import date
from typing import Dict, List
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload
from app.core.config import settings
from app.core.service_base import BaseService
from app.employees.models import Employee, EmployeeStatus, EmployeeType, Teacher
from app.employees.service import EmployeeService
from app.payrolls.models import Payroll
from app.payrolls.service import PayrollService
from app.reports.aggregation import aggregate

logger = logging.getLogger(__name__)

DISTRIBUTION_LABELS = {
    EmployeeType.TEACHER: "Teachers",
    EmployeeType.OFFICER: "Officers",
    EmployeeType.STAFF: "Staff",
}


def previous_months(today: date, months: int) -> List[tuple]:
    """(year, month) pairs for the last `months` months, oldest first, ending with today's."""
    periods = []
    year, month = today.year, today.month
    for _ in range(months):
        periods.append((year, month))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(periods))


class DashboardService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    def stats(self, today: date) -> Dict:
        """Employee counts and the current month's payroll figures."""
        employee_stats = EmployeeService(self.db).employee_stats()
        summary = PayrollService(self.db).get_period_summary(today.month, today.year)

        return {
            "employees": employee_stats,
            "payroll": {
                "current_month": {
                    "month": today.month,
                    "year": today.year,
                    **summary["counts"],
                    "total_gross_salary": summary["totals"]["gross_salary"],
                    "total_net_salary": summary["totals"]["net_salary"],
                }
            },
        }

    def recent_payrolls(self, limit: int = settings.recent_payrolls_limit) -> List[Payroll]:
        return self.db.query(Payroll).options(
            joinedload(Payroll.employee)
        ).order_by(Payroll.created_at.desc()).limit(limit).all()

    def salary_trends(self, today: date, months: int = settings.salary_trend_months) -> List[Dict]:
        """Gross and net payroll totals per month, oldest month first."""
        payroll_service = PayrollService(self.db)
        trends = []
        for year, month in previous_months(today, months):
            totals = payroll_service.period_totals(Payroll.month == month, Payroll.year == year)
            trends.append({
                "month": month,
                "year": year,
                "month_name": calendar.month_abbr[month],
                "total_gross": totals["gross_salary"],
                "total_net": totals["net_salary"],
                "count": totals["count"],
            })
        return trends

    def employee_distribution(self) -> List[Dict]:
        """Active employees per type."""
        counts = dict(
            self.db.query(Employee.employee_type, func.count(Employee.id))
            .filter(Employee.status == EmployeeStatus.ACTIVE)
            .group_by(Employee.employee_type)
            .all()
        )
        return [
            {"type": label, "count": counts.get(employee_type, 0)}
            for employee_type, label in DISTRIBUTION_LABELS.items()
        ]

    def department_summary(self) -> List[Dict]:
        """Teachers per department with their summed basic salary."""
        teachers = self.db.query(Teacher).options(joinedload(Teacher.employee)).all()
        groups = aggregate(
            teachers,
            lambda teacher: teacher.department,
            [("salary", lambda teacher: teacher.employee.basic_salary)]
        )
        logger.debug(f"Department summary over {len(teachers)} teachers in {len(groups)} departments")
        return [
            {"department": department, "count": group.count, "total_salary": group["salary"]}
            for department, group in groups.items()
        ]
