from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Annotated, List, Literal, Optional, Union
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from app.employees.models import EmployeeType, EmployeeStatus, ShiftType
from app.payrolls.models import PayrollStatus

Money = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]


class Allowances(BaseModel):
    house_rent: Money = Decimal("0")
    medical: Money = Decimal("0")
    transport: Money = Decimal("0")
    education: Money = Decimal("0")
    special: Money = Decimal("0")


class Deductions(BaseModel):
    tax: Money = Decimal("0")
    provident_fund: Money = Decimal("0")
    insurance: Money = Decimal("0")
    loan: Money = Decimal("0")
    other: Money = Decimal("0")


class AllowancesUpdate(BaseModel):
    house_rent: Optional[Money] = None
    medical: Optional[Money] = None
    transport: Optional[Money] = None
    education: Optional[Money] = None
    special: Optional[Money] = None


class DeductionsUpdate(BaseModel):
    tax: Optional[Money] = None
    provident_fund: Optional[Money] = None
    insurance: Optional[Money] = None
    loan: Optional[Money] = None
    other: Optional[Money] = None


# Role extensions, discriminated by role_type
class TeacherDetails(BaseModel):
    role_type: Literal["TEACHER"] = "TEACHER"
    faculty: str = Field(..., min_length=1)
    department: str = Field(..., min_length=1)
    research_area: Optional[str] = None
    publications: int = Field(0, ge=0)


class OfficerDetails(BaseModel):
    role_type: Literal["OFFICER"] = "OFFICER"
    office: str = Field(..., min_length=1)
    responsibilities: List[str] = []


class StaffDetails(BaseModel):
    role_type: Literal["STAFF"] = "STAFF"
    section: str = Field(..., min_length=1)
    shift: ShiftType


RoleDetails = Annotated[
    Union[TeacherDetails, OfficerDetails, StaffDetails],
    Field(discriminator="role_type")
]


class TeacherDetailsUpdate(BaseModel):
    role_type: Literal["TEACHER"] = "TEACHER"
    faculty: Optional[str] = None
    department: Optional[str] = None
    research_area: Optional[str] = None
    publications: Optional[int] = Field(None, ge=0)


class OfficerDetailsUpdate(BaseModel):
    role_type: Literal["OFFICER"] = "OFFICER"
    office: Optional[str] = None
    responsibilities: Optional[List[str]] = None


class StaffDetailsUpdate(BaseModel):
    role_type: Literal["STAFF"] = "STAFF"
    section: Optional[str] = None
    shift: Optional[ShiftType] = None


RoleDetailsUpdate = Annotated[
    Union[TeacherDetailsUpdate, OfficerDetailsUpdate, StaffDetailsUpdate],
    Field(discriminator="role_type")
]


class EmployeeCreate(BaseModel):
    name: str = Field(..., min_length=1)
    age: int = Field(..., gt=0)
    phone: str = Field(..., min_length=1, max_length=20)
    email: EmailStr
    designation: str = Field(..., min_length=1)
    employee_type: EmployeeType
    basic_salary: Money
    joining_date: date
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    avatar: Optional[str] = None
    allowances: Allowances = Allowances()
    deductions: Deductions = Deductions()
    role: RoleDetails

    @model_validator(mode="after")
    def check_role_matches_type(self):
        if self.role.role_type != self.employee_type.value:
            raise ValueError(
                f"role details for {self.role.role_type} do not match employee_type {self.employee_type.value}"
            )
        return self


class EmployeeUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    age: Optional[int] = Field(None, gt=0)
    phone: Optional[str] = Field(None, min_length=1, max_length=20)
    email: Optional[EmailStr] = None
    designation: Optional[str] = Field(None, min_length=1)
    basic_salary: Optional[Money] = None
    status: Optional[EmployeeStatus] = None
    avatar: Optional[str] = None
    allowances: Optional[AllowancesUpdate] = None
    deductions: Optional[DeductionsUpdate] = None
    role: Optional[RoleDetailsUpdate] = None

    @field_validator("name", "age", "phone", "email", "designation", "basic_salary", "status", mode="before")
    @classmethod
    def reject_null(cls, value):
        # Omit a field to leave it unchanged; these columns cannot be cleared
        if value is None:
            raise ValueError("may not be null")
        return value


class TeacherResponse(BaseModel):
    faculty: str
    department: str
    research_area: Optional[str]
    publications: Optional[int] = 0

    class Config:
        from_attributes = True


class OfficerResponse(BaseModel):
    office: str
    responsibilities: List[str] = []

    class Config:
        from_attributes = True


class StaffResponse(BaseModel):
    section: str
    shift: ShiftType

    class Config:
        from_attributes = True


class EmployeeResponse(BaseModel):
    id: UUID
    name: str
    age: int
    phone: str
    email: str
    designation: str
    employee_type: EmployeeType
    basic_salary: Decimal
    joining_date: date
    status: EmployeeStatus
    avatar: Optional[str]
    house_rent: Decimal
    medical: Decimal
    transport: Decimal
    education: Decimal
    special: Decimal
    tax: Decimal
    provident_fund: Decimal
    insurance: Decimal
    loan: Decimal
    other: Decimal
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    teacher: Optional[TeacherResponse] = None
    officer: Optional[OfficerResponse] = None
    staff: Optional[StaffResponse] = None

    class Config:
        from_attributes = True


class EmployeePayrollSummary(BaseModel):
    id: UUID
    month: int
    year: int
    gross_salary: Decimal
    net_salary: Decimal
    status: PayrollStatus
    paid_at: Optional[datetime]

    class Config:
        from_attributes = True


class EmployeeDetail(EmployeeResponse):
    recent_payrolls: List[EmployeePayrollSummary] = []


class EmployeeTypeCounts(BaseModel):
    teachers: int
    officers: int
    staff: int


class EmployeeStatusCounts(BaseModel):
    active: int
    inactive: int


class EmployeeStats(BaseModel):
    total: int
    by_type: EmployeeTypeCounts
    by_status: EmployeeStatusCounts
