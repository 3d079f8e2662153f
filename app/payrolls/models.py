from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, Enum, Uuid, UniqueConstraint, Index, CheckConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum
from app.core.database import PAYROLL_PERIOD_CONSTRAINT, Base, generate_uuid


class PayrollStatus(str, enum.Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class Payroll(Base):
    __tablename__ = "payrolls"
    __table_args__ = (
        UniqueConstraint("employee_id", "month", "year", name=PAYROLL_PERIOD_CONSTRAINT),
        Index("ix_payrolls_month_year", "month", "year"),
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_payroll_month"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=generate_uuid)
    employee_id = Column(Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    month = Column(Integer, nullable=False)  # 1-12
    year = Column(Integer, nullable=False)

    # Snapshot of the employee's compensation when the payroll was processed
    basic_salary = Column(Numeric(12, 2), nullable=False)
    house_rent = Column(Numeric(12, 2), nullable=False)
    medical = Column(Numeric(12, 2), nullable=False)
    transport = Column(Numeric(12, 2), nullable=False)
    education = Column(Numeric(12, 2), nullable=False)
    special = Column(Numeric(12, 2), nullable=False)
    tax = Column(Numeric(12, 2), nullable=False)
    provident_fund = Column(Numeric(12, 2), nullable=False)
    insurance = Column(Numeric(12, 2), nullable=False)
    loan = Column(Numeric(12, 2), nullable=False)
    other = Column(Numeric(12, 2), nullable=False)

    gross_salary = Column(Numeric(12, 2), nullable=False)
    net_salary = Column(Numeric(12, 2), nullable=False)
    status = Column(Enum(PayrollStatus), nullable=False, default=PayrollStatus.PENDING, index=True)
    paid_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    employee = relationship("Employee", back_populates="payrolls")
