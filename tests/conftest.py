"""
University Payroll - Test Configuration

Pytest fixtures and configuration.
"""

import os
import zlib

# Configure the application for tests before anything imports the settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DEBUG"] = "false"
os.environ["LOG_FILE"] = ""

from datetime import date
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.database import Base, enable_sqlite_foreign_keys, get_db
from app.employees.models import Employee, EmployeeStatus, EmployeeType, Officer, ShiftType, Staff, Teacher
from app.main import app
from app.payrolls.calculator import SalaryComponents, calculate_salary
from app.payrolls.models import Payroll, PayrollStatus


# Create test engine
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(test_engine)

TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database for each test."""
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Test client whose requests share the test session."""

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


# ===========================================
# DATA FIXTURES
# ===========================================

def make_employee(
    db: Session,
    name: str,
    employee_type: EmployeeType = EmployeeType.TEACHER,
    basic_salary: str = "50000",
    status: EmployeeStatus = EmployeeStatus.ACTIVE,
    designation: str = None,
    department: str = "Computer Science",
    faculty: str = "Engineering",
    **compensation
) -> Employee:
    """Insert an employee with the role details its type needs."""
    slug = name.lower().replace(" ", ".")
    employee = Employee(
        name=name,
        age=40,
        phone=f"+1-555-{zlib.crc32(slug.encode()) % 10_000_000:07d}",
        email=f"{slug}@university.edu",
        designation=designation or employee_type.value.title(),
        employee_type=employee_type,
        basic_salary=Decimal(basic_salary),
        joining_date=date(2020, 1, 15),
        status=status,
        **{field: Decimal(str(value)) for field, value in compensation.items()}
    )

    if employee_type == EmployeeType.TEACHER:
        employee.teacher = Teacher(faculty=faculty, department=department, publications=3)
    elif employee_type == EmployeeType.OFFICER:
        employee.officer = Officer(office="Registrar", responsibilities=["Admissions"])
    else:
        employee.staff = Staff(section="Maintenance", shift=ShiftType.MORNING)

    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


@pytest.fixture
def professor(db_session: Session) -> Employee:
    """A teacher on 80000 basic with the allowances and deductions of a senior professor."""
    return make_employee(
        db_session,
        "Ada Lovelace",
        basic_salary="80000",
        designation="Professor",
        house_rent=20000,
        medical=5000,
        transport=3000,
        education=2000,
        special=5000,
        tax=12000,
        provident_fund=8000,
        insurance=2000,
    )


@pytest.fixture
def staff_roster(db_session: Session, professor: Employee) -> list:
    """Three active employees of different types plus one inactive teacher."""
    officer = make_employee(
        db_session,
        "Grace Hopper",
        employee_type=EmployeeType.OFFICER,
        basic_salary="60000",
        designation="Registrar",
        house_rent=10000,
        tax=6000,
    )
    staff = make_employee(
        db_session,
        "Alan Turing",
        employee_type=EmployeeType.STAFF,
        basic_salary="30000",
        designation="Technician",
        medical=1500,
        loan=500,
    )
    make_employee(
        db_session,
        "Charles Babbage",
        basic_salary="70000",
        status=EmployeeStatus.INACTIVE,
        designation="Professor",
    )
    return [professor, officer, staff]


def employee_payload(**overrides) -> dict:
    payload = {
        "name": "Barbara Liskov",
        "age": 45,
        "phone": "+1-555-0100",
        "email": "barbara.liskov@university.edu",
        "designation": "Associate Professor",
        "employee_type": "TEACHER",
        "basic_salary": "65000.00",
        "joining_date": "2018-09-01",
        "allowances": {"house_rent": "15000", "medical": "2000"},
        "deductions": {"tax": "7000"},
        "role": {
            "role_type": "TEACHER",
            "faculty": "Engineering",
            "department": "Computer Science",
            "research_area": "Distributed Systems",
        },
    }
    payload.update(overrides)
    return payload


def make_payroll(
    db: Session,
    employee: Employee,
    month: int,
    year: int,
    status: PayrollStatus = PayrollStatus.PENDING
) -> Payroll:
    """Insert a payroll snapshot of the employee's current compensation."""
    components = SalaryComponents.from_source(employee)
    breakdown = calculate_salary(components)
    payroll = Payroll(
        employee_id=employee.id,
        month=month,
        year=year,
        gross_salary=breakdown.gross_salary,
        net_salary=breakdown.net_salary,
        status=status,
        **components.snapshot()
    )
    db.add(payroll)
    db.commit()
    db.refresh(payroll)
    return payroll
