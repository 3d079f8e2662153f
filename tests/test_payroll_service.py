"""
Payroll processing and payment tests.
"""

from decimal import Decimal
from uuid import uuid4

import pytest

from app.core.exceptions import (
    NoEligibleEmployeesError,
    PayrollAlreadyPaidError,
    ResourceNotFoundError,
    ValidationError,
)
from app.employees.models import Employee, EmployeeStatus, Teacher
from app.employees.service import EmployeeService
from app.payrolls.models import Payroll, PayrollStatus
from app.payrolls.service import ALREADY_PROCESSED, PayrollService
from conftest import make_employee, make_payroll


class TestProcessPeriod:
    def test_snapshot_for_senior_professor(self, db_session, professor):
        result = PayrollService(db_session).process_period(month=1, year=2024)

        assert len(result.processed) == 1
        assert result.errors == []

        payroll = result.processed[0]
        assert payroll.employee_id == professor.id
        assert payroll.gross_salary == Decimal("115000")
        assert payroll.net_salary == Decimal("93000")
        assert payroll.basic_salary == Decimal("80000")
        assert payroll.house_rent == Decimal("20000")
        assert payroll.status == PayrollStatus.PENDING
        assert payroll.paid_at is None

    def test_only_active_employees_are_processed(self, db_session, staff_roster):
        result = PayrollService(db_session).process_period(month=3, year=2024)

        processed_ids = {payroll.employee_id for payroll in result.processed}
        assert processed_ids == {employee.id for employee in staff_roster}
        assert db_session.query(Payroll).count() == 3

    def test_rerun_creates_nothing_and_reports_skips(self, db_session, staff_roster):
        payroll_service = PayrollService(db_session)
        payroll_service.process_period(month=3, year=2024)

        rerun = payroll_service.process_period(month=3, year=2024)

        assert rerun.processed == []
        assert len(rerun.errors) == 3
        assert all(outcome.message == ALREADY_PROCESSED for outcome in rerun.errors)
        assert db_session.query(Payroll).count() == 3

    def test_existing_payroll_skipped_others_processed(self, db_session, staff_roster):
        professor = staff_roster[0]
        make_payroll(db_session, professor, 4, 2024)

        result = PayrollService(db_session).process_period(month=4, year=2024)

        assert len(result.processed) == 2
        assert [(o.employee_id, o.employee_name) for o in result.errors] == [(professor.id, professor.name)]

    def test_restricted_to_listed_employees(self, db_session, staff_roster):
        officer = staff_roster[1]

        result = PayrollService(db_session).process_period(month=5, year=2024, employee_ids=[officer.id])

        assert [payroll.employee_id for payroll in result.processed] == [officer.id]

    def test_no_active_employees(self, db_session):
        with pytest.raises(NoEligibleEmployeesError) as exc_info:
            PayrollService(db_session).process_period(month=5, year=2030)

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "No active employees found"

    def test_only_inactive_employees(self, db_session):
        make_employee(db_session, "Charles Babbage", status=EmployeeStatus.INACTIVE)

        with pytest.raises(NoEligibleEmployeesError):
            PayrollService(db_session).process_period(month=5, year=2030)

    def test_concurrent_run_conflict_is_reported(self, db_session, professor, monkeypatch):
        payroll_service = PayrollService(db_session)
        payroll_service.process_period(month=6, year=2024)

        # Another run inserted the payroll between the existence check and the insert
        monkeypatch.setattr(PayrollService, "find_period_payroll", lambda self, *args: None)
        result = payroll_service.process_period(month=6, year=2024)

        assert result.processed == []
        assert len(result.errors) == 1
        assert result.errors[0].employee_id == professor.id
        assert result.errors[0].message == f"{ALREADY_PROCESSED} (conflict)"
        assert db_session.query(Payroll).filter(Payroll.month == 6, Payroll.year == 2024).count() == 1

    def test_snapshot_not_recomputed_after_salary_change(self, db_session, professor):
        payroll = PayrollService(db_session).process_period(month=7, year=2024).processed[0]

        professor.basic_salary = Decimal("90000")
        db_session.commit()
        db_session.refresh(payroll)

        assert payroll.basic_salary == Decimal("80000")
        assert payroll.gross_salary == Decimal("115000")


class TestMarkAsPaid:
    def test_pending_to_paid(self, db_session, professor):
        payroll = make_payroll(db_session, professor, 1, 2024)

        paid = PayrollService(db_session).mark_as_paid(payroll.id)

        assert paid.status == PayrollStatus.PAID
        assert paid.paid_at is not None

    def test_paying_twice_is_a_conflict(self, db_session, professor):
        payroll = make_payroll(db_session, professor, 1, 2024)
        payroll_service = PayrollService(db_session)
        paid_at = payroll_service.mark_as_paid(payroll.id).paid_at

        with pytest.raises(PayrollAlreadyPaidError) as exc_info:
            payroll_service.mark_as_paid(payroll.id)

        assert exc_info.value.status_code == 409
        assert payroll_service.get_payroll(payroll.id).paid_at == paid_at

    def test_missing_payroll(self, db_session):
        with pytest.raises(ResourceNotFoundError):
            PayrollService(db_session).mark_as_paid(uuid4())


class TestBulkMarkAsPaid:
    def test_pays_pending_and_skips_paid_or_unknown(self, db_session, staff_roster):
        professor, officer, staff = staff_roster
        pending_one = make_payroll(db_session, professor, 2, 2024)
        pending_two = make_payroll(db_session, officer, 2, 2024)
        already_paid = make_payroll(db_session, staff, 2, 2024, status=PayrollStatus.PAID)

        updated = PayrollService(db_session).bulk_mark_as_paid(
            [pending_one.id, pending_two.id, already_paid.id, uuid4()]
        )

        assert updated == 2
        db_session.expire_all()
        payrolls = db_session.query(Payroll).filter(Payroll.id.in_([pending_one.id, pending_two.id])).all()
        assert {payroll.status for payroll in payrolls} == {PayrollStatus.PAID}
        assert payrolls[0].paid_at == payrolls[1].paid_at

    def test_empty_list_is_rejected(self, db_session):
        with pytest.raises(ValidationError):
            PayrollService(db_session).bulk_mark_as_paid([])


class TestPeriodSummary:
    def test_counts_and_totals(self, db_session, staff_roster):
        payroll_service = PayrollService(db_session)
        result = payroll_service.process_period(month=8, year=2024)
        payroll_service.mark_as_paid(result.processed[0].id)

        summary = payroll_service.get_period_summary(8, 2024)

        assert summary["counts"] == {"total": 3, "paid": 1, "pending": 2}
        assert summary["totals"]["basic_salary"] == Decimal("170000")
        assert summary["totals"]["gross_salary"] == Decimal("216500")
        assert summary["totals"]["net_salary"] == Decimal("188000")
        assert summary["totals"]["total_allowances"] == Decimal("46500")
        assert summary["totals"]["total_deductions"] == Decimal("28500")

    def test_breakdown_by_employee_type(self, db_session, staff_roster):
        payroll_service = PayrollService(db_session)
        payroll_service.process_period(month=8, year=2024)

        by_type = payroll_service.get_period_summary(8, 2024)["by_type"]

        assert by_type == {
            "teachers": {"count": 1, "total_net_salary": Decimal("93000")},
            "officers": {"count": 1, "total_net_salary": Decimal("64000")},
            "staff": {"count": 1, "total_net_salary": Decimal("31000")},
        }

    def test_empty_period(self, db_session):
        summary = PayrollService(db_session).get_period_summary(1, 1999)

        assert summary["counts"] == {"total": 0, "paid": 0, "pending": 0}
        assert summary["totals"]["net_salary"] == Decimal("0")
        assert summary["by_type"]["teachers"] == {"count": 0, "total_net_salary": Decimal("0")}


class TestSlipsAndHistory:
    def test_salary_slip(self, db_session, professor):
        make_payroll(db_session, professor, 9, 2024)

        slip = PayrollService(db_session).get_salary_slip(professor.id, 9, 2024)

        assert slip.net_salary == Decimal("93000")
        assert slip.employee.name == professor.name

    def test_missing_salary_slip(self, db_session, professor):
        with pytest.raises(ResourceNotFoundError):
            PayrollService(db_session).get_salary_slip(professor.id, 9, 2024)

    def test_history_newest_period_first(self, db_session, professor):
        for month, year in [(11, 2023), (2, 2024), (12, 2023), (1, 2024)]:
            make_payroll(db_session, professor, month, year)

        employee, payrolls = PayrollService(db_session).get_employee_history(professor.id, limit=3)

        assert employee.id == professor.id
        assert [(p.year, p.month) for p in payrolls] == [(2024, 2), (2024, 1), (2023, 12)]

    def test_history_of_unknown_employee(self, db_session):
        with pytest.raises(ResourceNotFoundError):
            PayrollService(db_session).get_employee_history(uuid4())


def test_deleting_employee_removes_role_and_payrolls(db_session, professor):
    make_payroll(db_session, professor, 1, 2024)
    make_payroll(db_session, professor, 2, 2024)
    employee_id = professor.id

    EmployeeService(db_session).delete_employee(employee_id)

    assert db_session.query(Employee).filter(Employee.id == employee_id).count() == 0
    assert db_session.query(Teacher).filter(Teacher.employee_id == employee_id).count() == 0
    assert db_session.query(Payroll).filter(Payroll.employee_id == employee_id).count() == 0


def test_delete_payroll(db_session, professor):
    payroll = make_payroll(db_session, professor, 1, 2024)
    payroll_service = PayrollService(db_session)

    payroll_service.delete_payroll(payroll.id)

    assert db_session.query(Payroll).count() == 0
    with pytest.raises(ResourceNotFoundError):
        payroll_service.delete_payroll(payroll.id)
