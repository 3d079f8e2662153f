import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload
from app.core.database import integrity_violation
from app.core.exceptions import (
    NoEligibleEmployeesError,
    PayrollAlreadyPaidError,
    ResourceNotFoundError,
    ValidationError
)
from app.core.logging_config import log_payroll_run
from app.core.pagination import Pagination
from app.core.service_base import BaseService
from app.employees.models import ALLOWANCE_FIELDS, DEDUCTION_FIELDS, Employee, EmployeeStatus, EmployeeType
from app.payrolls.calculator import SalaryComponents, calculate_salary
from app.payrolls.filters import PayrollFilters
from app.payrolls.models import Payroll, PayrollStatus

logger = logging.getLogger(__name__)

ALREADY_PROCESSED = "Payroll already processed for this period"
SUMMARY_TYPE_KEYS = (
    ("teachers", EmployeeType.TEACHER),
    ("officers", EmployeeType.OFFICER),
    ("staff", EmployeeType.STAFF),
)


@dataclass
class PayrollOutcome:
    employee_id: UUID
    employee_name: str
    message: str


@dataclass
class ProcessResult:
    """Per-employee outcome of a payroll run."""

    processed: List[Payroll] = field(default_factory=list)
    errors: List[PayrollOutcome] = field(default_factory=list)


class PayrollService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    def find_period_payroll(self, employee_id: UUID, month: int, year: int) -> Optional[Payroll]:
        return self.db.query(Payroll).filter(
            Payroll.employee_id == employee_id,
            Payroll.month == month,
            Payroll.year == year
        ).first()

    def process_period(self, month: int, year: int, employee_ids: Optional[Sequence[UUID]] = None) -> ProcessResult:
        """Create a PENDING payroll for every active employee that has none for the period.

        Employees that already have a payroll for the period are reported, not
        duplicated, so running the same period twice is harmless. Each payroll
        is committed on its own: one failure does not undo the others.
        """
        started = time.time()

        query = self.db.query(Employee).filter(Employee.status == EmployeeStatus.ACTIVE)
        if employee_ids:
            query = query.filter(Employee.id.in_(list(employee_ids)))
        employees = query.order_by(Employee.name.asc()).all()

        if not employees:
            raise NoEligibleEmployeesError(month, year)

        # Capture identities up front, a rollback expires every loaded employee
        targets = [(employee.id, employee.name, SalaryComponents.from_source(employee)) for employee in employees]

        result = ProcessResult()
        for employee_id, employee_name, components in targets:
            if self.find_period_payroll(employee_id, month, year):
                logger.info(f"Skipping employee {employee_id}: payroll for {year}-{month:02d} exists")
                result.errors.append(PayrollOutcome(employee_id, employee_name, ALREADY_PROCESSED))
                continue

            payroll, failure = self._create_snapshot(employee_id, employee_name, month, year, components)
            if failure:
                result.errors.append(failure)
            else:
                result.processed.append(payroll)

        log_payroll_run(
            month,
            year,
            processed=len(result.processed),
            skipped=len(result.errors),
            duration=time.time() - started,
            logger=logger
        )
        return result

    def _create_snapshot(
        self,
        employee_id: UUID,
        employee_name: str,
        month: int,
        year: int,
        components: SalaryComponents
    ) -> Tuple[Optional[Payroll], Optional[PayrollOutcome]]:
        breakdown = calculate_salary(components)
        payroll = Payroll(
            employee_id=employee_id,
            month=month,
            year=year,
            gross_salary=breakdown.gross_salary,
            net_salary=breakdown.net_salary,
            status=PayrollStatus.PENDING,
            **components.snapshot()
        )

        self.db.add(payroll)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.safe_rollback()
            if integrity_violation(e) == "payroll_period":
                # A concurrent run inserted the same employee/period first
                logger.warning(f"Payroll conflict for employee {employee_id} in {year}-{month:02d}: {e.orig}")
                return None, PayrollOutcome(employee_id, employee_name, f"{ALREADY_PROCESSED} (conflict)")
            logger.error(f"Integrity error creating payroll for employee {employee_id}: {e.orig}")
            return None, PayrollOutcome(employee_id, employee_name, "Error creating payroll record")
        except SQLAlchemyError as e:
            self.safe_rollback()
            logger.error(f"Error creating payroll for employee {employee_id}: {str(e)}")
            return None, PayrollOutcome(employee_id, employee_name, "Error creating payroll record")

        self.db.refresh(payroll)
        return payroll, None

    def get_payroll(self, payroll_id: UUID) -> Payroll:
        """Get payroll by ID with its employee."""
        return self.get_or_404(Payroll, payroll_id, "Payroll", options=(joinedload(Payroll.employee),))

    def list_payrolls(self, filters: PayrollFilters, pagination: Pagination) -> Tuple[List[Payroll], int]:
        """Get one page of payrolls, latest period first."""
        query = filters.apply(self.db.query(Payroll).options(joinedload(Payroll.employee)))
        return self.paginate_query(
            query,
            pagination,
            order_by=(Payroll.year.desc(), Payroll.month.desc(), Payroll.created_at.desc())
        )

    def mark_as_paid(self, payroll_id: UUID) -> Payroll:
        """Move a PENDING payroll to PAID; paying twice is an error."""
        payroll = self.get_payroll(payroll_id)

        if payroll.status == PayrollStatus.PAID:
            raise PayrollAlreadyPaidError(str(payroll_id))

        payroll.status = PayrollStatus.PAID
        payroll.paid_at = datetime.now(timezone.utc)
        self.safe_commit("Error marking payroll as paid", resource_type="Payroll")
        self.db.refresh(payroll)

        self.log_service_action("mark_as_paid", "Payroll", str(payroll_id))
        return payroll

    def bulk_mark_as_paid(self, payroll_ids: Sequence[UUID]) -> int:
        """Pay every PENDING payroll among the ids with one shared timestamp.

        Unknown or already paid ids are left out of the count without error.
        """
        if not payroll_ids:
            raise ValidationError(
                detail="Payroll IDs are required",
                field="payroll_ids",
                value=[]
            )

        paid_at = datetime.now(timezone.utc)
        updated = self.db.query(Payroll).filter(
            Payroll.id.in_(list(payroll_ids)),
            Payroll.status == PayrollStatus.PENDING
        ).update(
            {Payroll.status: PayrollStatus.PAID, Payroll.paid_at: paid_at},
            synchronize_session="fetch"
        )
        self.safe_commit("Error marking payrolls as paid", resource_type="Payroll")

        logger.info(f"{updated} of {len(payroll_ids)} payroll records marked as paid")
        return updated

    def delete_payroll(self, payroll_id: UUID) -> None:
        payroll = self.get_or_404(Payroll, payroll_id, "Payroll")
        self.db.delete(payroll)
        self.safe_commit("Error deleting payroll", resource_type="Payroll")
        self.log_service_action("delete_payroll", "Payroll", str(payroll_id))

    def get_salary_slip(self, employee_id: UUID, month: int, year: int) -> Payroll:
        """The payroll of one employee for one period."""
        payroll = self.db.query(Payroll).options(joinedload(Payroll.employee)).filter(
            Payroll.employee_id == employee_id,
            Payroll.month == month,
            Payroll.year == year
        ).first()

        if not payroll:
            raise ResourceNotFoundError(
                resource_type="Salary slip",
                error_data={"employee_id": str(employee_id), "month": month, "year": year}
            )
        return payroll

    def get_employee_history(self, employee_id: UUID, limit: int = 12) -> Tuple[Employee, List[Payroll]]:
        """An employee's latest payrolls, newest period first."""
        employee = self.get_or_404(Employee, employee_id, "Employee")
        payrolls = self.db.query(Payroll).filter(
            Payroll.employee_id == employee_id
        ).order_by(Payroll.year.desc(), Payroll.month.desc()).limit(limit).all()
        return employee, payrolls

    def period_totals(self, *conditions) -> Dict[str, Decimal]:
        """Summed snapshot columns and record count, computed by the database."""
        columns = ("basic_salary",) + ALLOWANCE_FIELDS + DEDUCTION_FIELDS + ("gross_salary", "net_salary")
        row = self.db.query(
            func.count(Payroll.id),
            *[func.coalesce(func.sum(getattr(Payroll, name)), 0) for name in columns]
        ).filter(*conditions).one()

        totals = {"count": row[0]}
        for name, value in zip(columns, row[1:]):
            totals[name] = Decimal(str(value)) if value is not None else Decimal("0")
        return totals

    def get_period_summary(self, month: int, year: int) -> Dict:
        """Counts by status and salary totals for one period."""
        period = (Payroll.month == month, Payroll.year == year)

        status_counts = dict(
            self.db.query(Payroll.status, func.count(Payroll.id)).filter(*period).group_by(Payroll.status).all()
        )
        totals = self.period_totals(*period)
        by_type = {
            employee_type: (count, Decimal(str(net)))
            for employee_type, count, net in self.db.query(
                Employee.employee_type,
                func.count(Payroll.id),
                func.coalesce(func.sum(Payroll.net_salary), 0)
            ).select_from(Payroll).join(Payroll.employee).filter(*period).group_by(Employee.employee_type).all()
        }

        return {
            "period": {"month": month, "year": year},
            "counts": {
                "total": totals["count"],
                "paid": status_counts.get(PayrollStatus.PAID, 0),
                "pending": status_counts.get(PayrollStatus.PENDING, 0),
            },
            "totals": {
                "basic_salary": totals["basic_salary"],
                "total_allowances": sum((totals[name] for name in ALLOWANCE_FIELDS), Decimal("0")),
                "total_deductions": sum((totals[name] for name in DEDUCTION_FIELDS), Decimal("0")),
                "gross_salary": totals["gross_salary"],
                "net_salary": totals["net_salary"],
            },
            "by_type": {
                key: dict(zip(("count", "total_net_salary"), by_type.get(employee_type, (0, Decimal("0")))))
                for key, employee_type in SUMMARY_TYPE_KEYS
            },
        }
