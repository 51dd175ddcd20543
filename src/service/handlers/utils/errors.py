"""
Error types and HTTP mapping for the Club Dvigi handlers.

Every failure the handlers know how to describe is a ``BaseServiceError``.
The category decides the HTTP status; the message is what the caller sees in
the ``{"error": ...}`` body.
"""

from enum import Enum
from typing import Any, Dict, Optional

from aws_lambda_powertools.metrics import MetricUnit

from service.handlers.utils.observability import logger, metrics, tracer

# Messages returned to the storefront form
MISSING_EMAIL_MESSAGE = 'Email requerido'
MISSING_CONFIGURATION_MESSAGE = 'Faltan variables de entorno'
METHOD_NOT_ALLOWED_MESSAGE = 'Method not allowed'
GENERIC_ERROR_MESSAGE = 'Server error'


class ErrorCategory(str, Enum):
    """Error categories for classification."""
    VALIDATION = "VALIDATION"
    UPSTREAM_REJECTION = "UPSTREAM_REJECTION"
    CONFIGURATION = "CONFIGURATION"
    EXTERNAL_SERVICE = "EXTERNAL_SERVICE"


class BaseServiceError(Exception):
    """Base exception class for service errors."""

    def __init__(
        self,
        message: str,
        error_code: str,
        category: ErrorCategory,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }


class RequestValidationError(BaseServiceError):
    """Raised when the request body is missing a required field or has bad types."""

    def __init__(self, message: str = MISSING_EMAIL_MESSAGE, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            category=ErrorCategory.VALIDATION,
            details=details,
        )


class UpstreamUserError(BaseServiceError):
    """Raised when a Shopify mutation reports a userError."""

    def __init__(self, message: str, operation: str, field: Optional[list] = None):
        super().__init__(
            message=message,
            error_code="UPSTREAM_USER_ERROR",
            category=ErrorCategory.UPSTREAM_REJECTION,
            details={"operation": operation, "field": field},
        )
        self.operation = operation


class ConfigurationError(BaseServiceError):
    """Raised when the shop domain or admin token is not configured."""

    def __init__(self, message: str = MISSING_CONFIGURATION_MESSAGE, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            category=ErrorCategory.CONFIGURATION,
            details=details,
        )


class UpstreamServiceError(BaseServiceError):
    """Raised when the Admin API cannot be reached or answers with something unusable."""

    def __init__(self, message: str, operation: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="UPSTREAM_SERVICE_ERROR",
            category=ErrorCategory.EXTERNAL_SERVICE,
            details={"operation": operation, **(details or {})},
        )
        self.operation = operation


_STATUS_BY_CATEGORY = {
    ErrorCategory.VALIDATION: 400,
    ErrorCategory.UPSTREAM_REJECTION: 400,
    ErrorCategory.CONFIGURATION: 500,
    ErrorCategory.EXTERNAL_SERVICE: 500,
}


def get_http_status_code(error: BaseServiceError) -> int:
    """Map a service error to its HTTP status code."""
    return _STATUS_BY_CATEGORY.get(error.category, 500)


@tracer.capture_method
def log_error_metrics(error: BaseServiceError) -> None:
    """Log a service error and record it as a metric."""
    log_extra = {"error": error.to_dict()}
    if get_http_status_code(error) >= 500:
        logger.error("Service error", extra=log_extra)
    else:
        logger.warning("Request rejected", extra=log_extra)

    if isinstance(error, UpstreamUserError):
        metrics.add_metric(name="UpstreamUserError", unit=MetricUnit.Count, value=1)
    metrics.add_metric(name="ErrorCount", unit=MetricUnit.Count, value=1)
