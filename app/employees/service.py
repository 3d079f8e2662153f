import logging
from typing import Dict, List, Tuple
from uuid import UUID
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload
from app.core.exceptions import ResourceNotFoundError, RoleMismatchError
from app.core.pagination import Pagination
from app.core.service_base import BaseService
from app.employees.filters import EmployeeFilters
from app.employees.models import Employee, EmployeeStatus, EmployeeType, Officer, Staff, Teacher
from app.employees.schemas import EmployeeCreate, EmployeeUpdate
from app.payrolls.models import Payroll

logger = logging.getLogger(__name__)

ROLE_MODELS = {
    EmployeeType.TEACHER: ("teacher", Teacher),
    EmployeeType.OFFICER: ("officer", Officer),
    EmployeeType.STAFF: ("staff", Staff),
}

ROLE_LOAD_OPTIONS = (
    selectinload(Employee.teacher),
    selectinload(Employee.officer),
    selectinload(Employee.staff),
)


class EmployeeService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)

    def create_employee(self, employee_data: EmployeeCreate) -> Employee:
        """Create an employee together with the role details for its type."""
        self.check_unique_constraint(Employee, "email", employee_data.email, "Employee")
        self.check_unique_constraint(Employee, "phone", employee_data.phone, "Employee")

        db_employee = Employee(
            name=employee_data.name,
            age=employee_data.age,
            phone=employee_data.phone,
            email=employee_data.email,
            designation=employee_data.designation,
            employee_type=employee_data.employee_type,
            basic_salary=employee_data.basic_salary,
            joining_date=employee_data.joining_date,
            status=employee_data.status,
            avatar=employee_data.avatar,
            **employee_data.allowances.model_dump(),
            **employee_data.deductions.model_dump()
        )

        attribute, model_class = ROLE_MODELS[employee_data.employee_type]
        setattr(db_employee, attribute, model_class(**employee_data.role.model_dump(exclude={"role_type"})))

        self.db.add(db_employee)
        self.safe_commit("Error creating employee", resource_type="Employee")
        self.db.refresh(db_employee)

        self.log_service_action("create_employee", "Employee", str(db_employee.id), {
            "employee_type": db_employee.employee_type.value
        })
        return db_employee

    def get_employee(self, employee_id: UUID) -> Employee:
        """Get employee by ID with its role details."""
        return self.get_or_404(Employee, employee_id, "Employee", options=ROLE_LOAD_OPTIONS)

    def get_recent_payrolls(self, employee_id: UUID, limit: int = 5) -> List[Payroll]:
        return self.db.query(Payroll).filter(
            Payroll.employee_id == employee_id
        ).order_by(Payroll.created_at.desc(), Payroll.year.desc(), Payroll.month.desc()).limit(limit).all()

    def list_employees(self, filters: EmployeeFilters, pagination: Pagination) -> Tuple[List[Employee], int]:
        """Get one page of employees matching the filters, newest first."""
        query = filters.apply(self.db.query(Employee).options(*ROLE_LOAD_OPTIONS))
        return self.paginate_query(
            query,
            pagination,
            order_by=(Employee.created_at.desc(), Employee.name.asc())
        )

    def update_employee(self, employee_id: UUID, employee_data: EmployeeUpdate) -> Employee:
        """Update employee fields; role details only apply to the matching type."""
        employee = self.get_employee(employee_id)

        update_data = employee_data.model_dump(exclude_unset=True, exclude={"allowances", "deductions", "role"})

        if "email" in update_data:
            self.check_unique_constraint(Employee, "email", update_data["email"], "Employee", exclude_id=employee.id)
        if "phone" in update_data:
            self.check_unique_constraint(Employee, "phone", update_data["phone"], "Employee", exclude_id=employee.id)

        for field, value in update_data.items():
            setattr(employee, field, value)

        for group in (employee_data.allowances, employee_data.deductions):
            if group is None:
                continue
            for field, value in group.model_dump(exclude_none=True).items():
                setattr(employee, field, value)

        if employee_data.role is not None:
            self._update_role(employee, employee_data)

        self.safe_commit("Error updating employee", resource_type="Employee")
        self.db.refresh(employee)

        self.log_service_action("update_employee", "Employee", str(employee.id))
        return employee

    def _update_role(self, employee: Employee, employee_data: EmployeeUpdate):
        role = employee_data.role
        if role.role_type != employee.employee_type.value:
            raise RoleMismatchError(employee.employee_type.value, role.role_type)

        extension = employee.role
        if extension is None:
            raise ResourceNotFoundError(
                resource_type=f"{employee.employee_type.value.title()} details",
                resource_id=str(employee.id)
            )

        for field, value in role.model_dump(exclude_unset=True, exclude={"role_type"}).items():
            if value is None and field != "research_area":
                continue
            setattr(extension, field, value)

    def delete_employee(self, employee_id: UUID) -> None:
        """Delete an employee; role details and payrolls go with it."""
        employee = self.get_employee(employee_id)
        self.db.delete(employee)
        self.safe_commit("Error deleting employee", resource_type="Employee")
        logger.info(f"Employee {employee_id} deleted with role details and payrolls")

    def employee_stats(self) -> Dict:
        """Employee counts by type and by status."""
        type_counts = dict(
            self.db.query(Employee.employee_type, func.count(Employee.id)).group_by(Employee.employee_type).all()
        )
        status_counts = dict(
            self.db.query(Employee.status, func.count(Employee.id)).group_by(Employee.status).all()
        )
        return {
            "total": sum(type_counts.values()),
            "by_type": {
                "teachers": type_counts.get(EmployeeType.TEACHER, 0),
                "officers": type_counts.get(EmployeeType.OFFICER, 0),
                "staff": type_counts.get(EmployeeType.STAFF, 0),
            },
            "by_status": {
                "active": status_counts.get(EmployeeStatus.ACTIVE, 0),
                "inactive": status_counts.get(EmployeeStatus.INACTIVE, 0),
            },
        }
