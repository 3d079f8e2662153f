from sqlalchemy import Column, String, Date, DateTime, ForeignKey, Integer, Numeric, Enum, Text, JSON, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from app.core.database import Base, generate_uuid


class EmployeeType(str, enum.Enum):
    TEACHER = "TEACHER"
    OFFICER = "OFFICER"
    STAFF = "STAFF"


class EmployeeStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class ShiftType(str, enum.Enum):
    MORNING = "MORNING"
    EVENING = "EVENING"
    NIGHT = "NIGHT"


ALLOWANCE_FIELDS = ("house_rent", "medical", "transport", "education", "special")
DEDUCTION_FIELDS = ("tax", "provident_fund", "insurance", "loan", "other")


class Employee(Base):
    __tablename__ = "employees"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    age = Column(Integer, nullable=False)
    phone = Column(String(20), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    designation = Column(String(100), nullable=False)
    employee_type = Column(Enum(EmployeeType), nullable=False, index=True)
    basic_salary = Column(Numeric(12, 2), nullable=False)
    joining_date = Column(Date, nullable=False)
    status = Column(Enum(EmployeeStatus), nullable=False, default=EmployeeStatus.ACTIVE, index=True)
    avatar = Column(Text)

    # Allowances
    house_rent = Column(Numeric(12, 2), nullable=False, default=0)
    medical = Column(Numeric(12, 2), nullable=False, default=0)
    transport = Column(Numeric(12, 2), nullable=False, default=0)
    education = Column(Numeric(12, 2), nullable=False, default=0)
    special = Column(Numeric(12, 2), nullable=False, default=0)

    # Deductions
    tax = Column(Numeric(12, 2), nullable=False, default=0)
    provident_fund = Column(Numeric(12, 2), nullable=False, default=0)
    insurance = Column(Numeric(12, 2), nullable=False, default=0)
    loan = Column(Numeric(12, 2), nullable=False, default=0)
    other = Column(Numeric(12, 2), nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    teacher = relationship("Teacher", back_populates="employee", uselist=False, cascade="all, delete-orphan")
    officer = relationship("Officer", back_populates="employee", uselist=False, cascade="all, delete-orphan")
    staff = relationship("Staff", back_populates="employee", uselist=False, cascade="all, delete-orphan")
    payrolls = relationship(
        "Payroll",
        back_populates="employee",
        cascade="all, delete-orphan",
        passive_deletes=True
    )

    @property
    def role(self):
        """The role extension matching employee_type."""
        return {
            EmployeeType.TEACHER: self.teacher,
            EmployeeType.OFFICER: self.officer,
            EmployeeType.STAFF: self.staff,
        }.get(self.employee_type)


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=generate_uuid)
    employee_id = Column(Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="CASCADE"), unique=True, nullable=False)
    faculty = Column(String(150), nullable=False, index=True)
    department = Column(String(150), nullable=False, index=True)
    research_area = Column(String(255))
    publications = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    employee = relationship("Employee", back_populates="teacher")


class Officer(Base):
    __tablename__ = "officers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=generate_uuid)
    employee_id = Column(Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="CASCADE"), unique=True, nullable=False)
    office = Column(String(150), nullable=False, index=True)
    responsibilities = Column(JSON, nullable=False, default=list)  # list of strings
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    employee = relationship("Employee", back_populates="officer")


class Staff(Base):
    __tablename__ = "staff"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=generate_uuid)
    employee_id = Column(Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="CASCADE"), unique=True, nullable=False)
    section = Column(String(150), nullable=False, index=True)
    shift = Column(Enum(ShiftType), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    employee = relationship("Employee", back_populates="staff")
