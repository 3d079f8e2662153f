"""
Base Service Class with Enhanced Error Handling
"""

import logging
from typing import Any, Dict, List, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError, IntegrityError

from app.core.database import integrity_violation
from app.core.exceptions import (
    DatabaseError,
    ResourceNotFoundError,
    ResourceAlreadyExistsError,
    ValidationError,
    debug_details,
)
from app.core.pagination import Pagination

logger = logging.getLogger(__name__)


class BaseService:
    """Base service class with common error handling patterns."""

    def __init__(self, db: Session):
        self.db = db

    def safe_commit(self, error_message: str = "Database operation failed", resource_type: str = "Resource") -> bool:
        """Commit, turning database failures into API errors.

        Only unique violations are conflicts; any other constraint failure
        means the submitted data was invalid.
        """
        try:
            self.db.commit()
            return True
        except IntegrityError as e:
            self.db.rollback()
            violation = integrity_violation(e)
            logger.error(f"Integrity error ({violation}) during commit: {str(e.orig)}")
            if violation in ("unique", "payroll_period"):
                raise ResourceAlreadyExistsError(
                    resource_type=resource_type,
                    error_data=debug_details(e.orig)
                )
            raise ValidationError(
                detail=f"Invalid {resource_type.lower()} data",
                error_data={"constraint": violation, **debug_details(e.orig)}
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error during commit: {str(e)}")
            raise DatabaseError(
                detail=error_message,
                error_data=debug_details(e)
            )

    def safe_rollback(self):
        """Safely rollback database transaction."""
        try:
            self.db.rollback()
        except SQLAlchemyError as e:
            logger.error(f"Error during rollback: {str(e)}")

    def get_or_404(self, model_class, resource_id, resource_type: str = None, options: tuple = ()):
        """Get resource by ID or raise 404 error."""
        try:
            query = self.db.query(model_class)
            if options:
                query = query.options(*options)
            resource = query.filter(model_class.id == resource_id).first()
        except SQLAlchemyError as e:
            logger.error(f"Database error in get_or_404: {str(e)}")
            raise DatabaseError(
                detail=f"Error retrieving {resource_type or model_class.__name__}",
                error_data={"resource_id": str(resource_id), **debug_details(e)}
            )

        if not resource:
            raise ResourceNotFoundError(
                resource_type=resource_type or model_class.__name__,
                resource_id=str(resource_id)
            )

        return resource

    def check_unique_constraint(
        self,
        model_class,
        field_name: str,
        field_value: Any,
        resource_type: str = None,
        exclude_id=None
    ):
        """Check if a field value is unique."""
        query = self.db.query(model_class).filter(
            getattr(model_class, field_name) == field_value
        )

        # Exclude current record if updating
        if exclude_id is not None:
            query = query.filter(model_class.id != exclude_id)

        if query.first():
            raise ResourceAlreadyExistsError(
                resource_type=resource_type or model_class.__name__,
                field=field_name,
                value=str(field_value)
            )

    def paginate_query(self, query, pagination: Pagination, order_by: tuple = ()) -> Tuple[List[Any], int]:
        """Return one page of the query plus the unpaginated total."""
        total = query.order_by(None).count()
        if order_by:
            query = query.order_by(*order_by)
        items = query.offset(pagination.skip).limit(pagination.take).all()
        return items, total

    def log_service_action(
        self,
        action: str,
        resource_type: str = None,
        resource_id: str = None,
        extra_data: Dict[str, Any] = None
    ):
        """Log service actions."""
        log_data = {
            "action": action,
            "service": self.__class__.__name__
        }

        if resource_type:
            log_data["resource_type"] = resource_type
        if resource_id:
            log_data["resource_id"] = resource_id
        if extra_data:
            log_data.update(extra_data)

        logger.info(f"Service action: {action}", extra=log_data)
