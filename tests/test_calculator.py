"""
Salary calculation tests.
"""

from decimal import Decimal
from types import SimpleNamespace

from app.payrolls.calculator import (
    SalaryComponents,
    calculate_salary,
    net_salary_of,
    to_decimal,
    total_allowances,
    total_deductions,
)


def professor_components() -> SalaryComponents:
    return SalaryComponents(
        basic_salary=Decimal("80000"),
        house_rent=Decimal("20000"),
        medical=Decimal("5000"),
        transport=Decimal("3000"),
        education=Decimal("2000"),
        special=Decimal("5000"),
        tax=Decimal("12000"),
        provident_fund=Decimal("8000"),
        insurance=Decimal("2000"),
    )


class TestCalculateSalary:
    def test_gross_and_net_for_senior_professor(self):
        breakdown = calculate_salary(professor_components())

        assert breakdown.total_allowances == Decimal("35000")
        assert breakdown.total_deductions == Decimal("22000")
        assert breakdown.gross_salary == Decimal("115000")
        assert breakdown.net_salary == Decimal("93000")

    def test_zero_compensation(self):
        breakdown = calculate_salary(SalaryComponents())

        assert breakdown.gross_salary == Decimal("0")
        assert breakdown.net_salary == Decimal("0")

    def test_gross_is_basic_plus_allowances(self):
        components = professor_components()
        breakdown = calculate_salary(components)

        assert breakdown.gross_salary == components.basic_salary + total_allowances(components)
        assert breakdown.net_salary == breakdown.gross_salary - total_deductions(components)

    def test_net_salary_can_be_negative(self):
        components = SalaryComponents(basic_salary=Decimal("1000"), loan=Decimal("1500"))

        assert calculate_salary(components).net_salary == Decimal("-500")

    def test_cents_are_kept_exactly(self):
        components = SalaryComponents(
            basic_salary=Decimal("1000.10"),
            medical=Decimal("0.20"),
            tax=Decimal("0.05"),
        )
        breakdown = calculate_salary(components)

        assert breakdown.gross_salary == Decimal("1000.30")
        assert breakdown.net_salary == Decimal("1000.25")


class TestSalaryComponents:
    def test_from_object_reads_missing_fields_as_zero(self):
        source = SimpleNamespace(basic_salary=Decimal("500"), house_rent=Decimal("50"))

        components = SalaryComponents.from_source(source)

        assert components.basic_salary == Decimal("500")
        assert components.house_rent == Decimal("50")
        assert components.tax == Decimal("0")

    def test_from_dict_converts_numbers(self):
        components = SalaryComponents.from_source({"basic_salary": 100, "tax": "10.5", "loan": 0.1})

        assert components.basic_salary == Decimal("100")
        assert components.tax == Decimal("10.5")
        assert components.loan == Decimal("0.1")

    def test_snapshot_has_all_eleven_fields(self):
        snapshot = professor_components().snapshot()

        assert len(snapshot) == 11
        assert snapshot["basic_salary"] == Decimal("80000")
        assert snapshot["provident_fund"] == Decimal("8000")

    def test_net_salary_of_source(self):
        source = SimpleNamespace(basic_salary=Decimal("2000"), special=Decimal("300"), other=Decimal("100"))

        assert net_salary_of(source) == Decimal("2200")


def test_to_decimal_of_none_is_zero():
    assert to_decimal(None) == Decimal("0")
