from dataclasses import dataclass
from typing import List, Optional
from sqlalchemy import or_
from app.employees.models import Employee, EmployeeType, EmployeeStatus


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


@dataclass(frozen=True)
class EmployeeFilters:
    """Listing filters: exact type/status, free-text search over name, email or phone."""

    employee_type: Optional[EmployeeType] = None
    status: Optional[EmployeeStatus] = None
    search: Optional[str] = None

    def conditions(self) -> List:
        conditions = []
        if self.employee_type is not None:
            conditions.append(Employee.employee_type == self.employee_type)
        if self.status is not None:
            conditions.append(Employee.status == self.status)
        if self.search and self.search.strip():
            pattern = f"%{escape_like(self.search.strip())}%"
            conditions.append(or_(
                Employee.name.ilike(pattern, escape="\\"),
                Employee.email.ilike(pattern, escape="\\"),
                Employee.phone.ilike(pattern, escape="\\"),
            ))
        return conditions

    def apply(self, query):
        conditions = self.conditions()
        if conditions:
            query = query.filter(*conditions)
        return query
