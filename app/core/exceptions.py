"""
Custom Exception Classes for the Payroll Management System
"""

from typing import Any, Dict, Optional
from fastapi import HTTPException, status

from app.core.config import settings


class BaseAPIException(HTTPException):
    """Base exception class for API errors with enhanced error details."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        error_data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code
        self.error_data = error_data or {}


# Resource Exceptions
class ResourceNotFoundError(BaseAPIException):
    """Requested resource not found."""

    def __init__(self, resource_type: str, resource_id: str = None, error_data: Optional[Dict[str, Any]] = None):
        detail = f"{resource_type} not found"
        if resource_id:
            detail += f" (ID: {resource_id})"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            error_code="RESOURCE_NOT_FOUND",
            error_data={"resource_type": resource_type, "resource_id": resource_id, **(error_data or {})}
        )


class ResourceAlreadyExistsError(BaseAPIException):
    """Resource already exists."""

    def __init__(self, resource_type: str, field: str = None, value: str = None, error_data: Optional[Dict[str, Any]] = None):
        detail = f"{resource_type} already exists"
        if field and value:
            detail += f" with {field}: {value}"

        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            error_code="RESOURCE_ALREADY_EXISTS",
            error_data={"resource_type": resource_type, "field": field, "value": value, **(error_data or {})}
        )


# Validation Exceptions
class ValidationError(BaseAPIException):
    """Data validation failed."""

    def __init__(self, detail: str, field: str = None, value: Any = None, error_data: Optional[Dict[str, Any]] = None):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=detail,
            error_code="VALIDATION_ERROR",
            error_data={"field": field, "value": value, **(error_data or {})}
        )


class RoleMismatchError(ValidationError):
    """Role extension does not match the employee type."""

    def __init__(self, employee_type: str, role_type: str):
        super().__init__(
            detail=f"Role details for {role_type} cannot be applied to a {employee_type} employee",
            field="role",
            value=role_type,
            error_data={"employee_type": employee_type}
        )
        self.error_code = "ROLE_MISMATCH"


# Database Exceptions
class DatabaseError(BaseAPIException):
    """Database operation failed."""

    def __init__(self, detail: str = "Database operation failed", operation: str = None, error_data: Optional[Dict[str, Any]] = None):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code="DATABASE_ERROR",
            error_data={"operation": operation, **(error_data or {})}
        )


# Payroll Exceptions
class NoEligibleEmployeesError(BaseAPIException):
    """No active employees matched a payroll run."""

    def __init__(self, month: int, year: int, error_data: Optional[Dict[str, Any]] = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No active employees found",
            error_code="NO_ELIGIBLE_EMPLOYEES",
            error_data={"month": month, "year": year, **(error_data or {})}
        )


class PayrollAlreadyPaidError(BaseAPIException):
    """Payroll has already been marked as paid."""

    def __init__(self, payroll_id: str = None, error_data: Optional[Dict[str, Any]] = None):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Payroll already marked as paid",
            error_code="PAYROLL_ALREADY_PAID",
            error_data={"payroll_id": payroll_id, **(error_data or {})}
        )


def debug_details(error: BaseException) -> Dict[str, Any]:
    """Underlying error text, exposed to clients only in debug mode."""
    if not settings.debug:
        return {}
    return {"exception_type": type(error).__name__, "original_error": str(error)}
