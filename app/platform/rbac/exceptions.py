"""Error kinds raised by the entitlement engine."""
from rest_framework import status


class RbacError(Exception):
    """Base class; carries the machine-readable code and HTTP status used in api_response."""

    error_code = "RBAC_ERROR"
    http_status = status.HTTP_400_BAD_REQUEST
    retryable = False

    def __init__(self, message, error_code=None, errors=None):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.errors = list(errors or [])


class NotFoundError(RbacError):
    error_code = "NOT_FOUND"
    http_status = status.HTTP_404_NOT_FOUND


class UserNotFoundError(NotFoundError):
    error_code = "USER_NOT_FOUND"


class AssignmentNotFoundError(NotFoundError):
    error_code = "ASSIGNMENT_NOT_FOUND"


class InvalidArgumentError(RbacError):
    error_code = "INVALID_ARGUMENT"


class InvalidAssignmentError(RbacError):
    error_code = "INVALID_ASSIGNMENT"


class UnauthorizedError(RbacError):
    error_code = "UNAUTHORIZED"
    http_status = status.HTTP_403_FORBIDDEN


class ActivationFailedError(RbacError):
    """Target activation affected no rows; the reset step was rolled back."""

    error_code = "ACTIVATION_FAILED"
    http_status = status.HTTP_409_CONFLICT
    retryable = True


class InternalError(RbacError):
    """Unexpected record store failure surfaced as a generic outcome."""

    error_code = "INTERNAL_ERROR"
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
