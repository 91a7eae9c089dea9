"""
Custom Exception Classes for the SkillMatch API
"""
from typing import Dict, Any
from fastapi import HTTPException
from pymongo.errors import PyMongoError


class SkillMatchError(Exception):
    """Base exception for the SkillMatch API"""
    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None,
        cause: Exception = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/response"""
        result = {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(SkillMatchError):
    """Raised when request data or uploaded documents fail validation"""
    status_code = 400

    def __init__(self, message: str, field: str = None, value: Any = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if field:
            details['field'] = field
        if value is not None:
            details['invalid_value'] = str(value)
        super().__init__(message, error_code="VALIDATION_ERROR", details=details, **kwargs)


class NotFoundError(SkillMatchError):
    """Raised when a resume, job or match does not exist"""
    status_code = 404

    def __init__(self, message: str, resource: str = None, resource_id: str = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if resource:
            details['resource'] = resource
        if resource_id:
            details['resource_id'] = resource_id
        super().__init__(message, error_code="NOT_FOUND", details=details, **kwargs)


class DatabaseError(SkillMatchError):
    """Raised when database operations fail"""

    def __init__(self, message: str, operation: str = None, collection: str = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if operation:
            details['operation'] = operation
        if collection:
            details['collection'] = collection
        super().__init__(message, error_code="DATABASE_ERROR", details=details, **kwargs)


class ProcessingError(SkillMatchError):
    """Raised when a resume document cannot be parsed"""

    def __init__(self, message: str, document_id: str = None, document_type: str = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if document_id:
            details['document_id'] = document_id
        if document_type:
            details['document_type'] = document_type
        super().__init__(message, error_code="PROCESSING_ERROR", details=details, **kwargs)


class ConfigurationError(SkillMatchError):
    """Raised when matcher configuration is invalid or missing"""
    status_code = 400

    def __init__(self, message: str, config_key: str = None, config_value: Any = None, **kwargs):
        details = kwargs.pop('details', None) or {}
        if config_key:
            details['config_key'] = config_key
        if config_value is not None:
            details['config_value'] = str(config_value)
        super().__init__(message, error_code="CONFIGURATION_ERROR", details=details, **kwargs)


def map_to_http_exception(exc: SkillMatchError) -> HTTPException:
    """HTTP error carrying the exception's status code and to_dict() body"""
    return HTTPException(
        status_code=exc.status_code,
        detail={"error": exc.to_dict(), "message": exc.message}
    )


class ExceptionContext:
    """
    Wraps a unit of work so that unexpected exceptions surface as SkillMatchError.

    Domain errors and HTTPException pass through untouched. pymongo errors
    become DatabaseError, KeyError/ValueError/TypeError become ValidationError
    and anything else becomes ProcessingError; the keyword context is attached
    as details.
    """

    def __init__(self, operation: str, logger=None, **context):
        self.operation = operation
        self.logger = logger
        self.context = context

    def __enter__(self):
        if self.logger:
            self.logger.debug(f"Starting operation: {self.operation}", extra=self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            if self.logger:
                self.logger.debug(f"Operation completed: {self.operation}", extra=self.context)
            return False

        if isinstance(exc_val, (SkillMatchError, HTTPException)):
            return False

        if self.logger:
            self.logger.error(
                f"Operation failed: {self.operation} - {exc_val}",
                extra={**self.context, "exception_type": exc_type.__name__}
            )

        details = dict(self.context)
        if isinstance(exc_val, PyMongoError):
            raise DatabaseError(
                f"Database error in {self.operation}: {exc_val}",
                operation=self.operation, details=details, cause=exc_val
            ) from exc_val
        if isinstance(exc_val, (KeyError, ValueError, TypeError)):
            raise ValidationError(
                f"Validation error in {self.operation}: {exc_val}", details=details, cause=exc_val
            ) from exc_val
        raise ProcessingError(
            f"Processing error in {self.operation}: {exc_val}", details=details, cause=exc_val
        ) from exc_val
