from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID
from app.payrolls.models import Payroll, PayrollStatus


@dataclass(frozen=True)
class PayrollFilters:
    """Listing filters, every supplied one must match."""

    month: Optional[int] = None
    year: Optional[int] = None
    status: Optional[PayrollStatus] = None
    employee_id: Optional[UUID] = None

    def conditions(self) -> List:
        conditions = []
        if self.month is not None:
            conditions.append(Payroll.month == self.month)
        if self.year is not None:
            conditions.append(Payroll.year == self.year)
        if self.status is not None:
            conditions.append(Payroll.status == self.status)
        if self.employee_id is not None:
            conditions.append(Payroll.employee_id == self.employee_id)
        return conditions

    def apply(self, query):
        conditions = self.conditions()
        if conditions:
            query = query.filter(*conditions)
        return query
