import logging
from rest_framework.views import exception_handler
from rest_framework.exceptions import (
    APIException,
    ValidationError,
    NotAuthenticated,
    AuthenticationFailed,
    PermissionDenied,
)
from rest_framework import status
from rest_framework.serializers import ValidationError as SerializerValidationError

from app.platform.rbac.exceptions import RbacError
from app.utils.response import api_response, error_response

logger = logging.getLogger(__name__)


def _detail_strings(errors):
    return [error.string if hasattr(error, 'string') else str(error) for error in errors]


def format_validation_error(error_detail):
    """
    Convert DRF ValidationError detail into a readable error message.

    Handles:
    - Dict format: {'level': [ErrorDetail(...)]} -> "Level: \"X\" is not a valid choice."
    - List format: [ErrorDetail(...)] -> "\"X\" is not a valid choice."
    - String format: "error message" -> "error message"
    """
    if isinstance(error_detail, dict):
        messages = []
        for field, errors in error_detail.items():
            if not isinstance(errors, (list, tuple)):
                errors = [errors]
            field_name = field.replace('_', ' ').title()
            messages.append(f"{field_name}: {', '.join(_detail_strings(errors))}")
        return ". ".join(messages)

    if isinstance(error_detail, list):
        return ". ".join(_detail_strings(error_detail))

    return str(error_detail)


def custom_exception_handler(exc, context):
    """
    Global exception handler.
    Every API error, expected or not, leaves through the api_response() envelope.
    """
    view = context.get('view', None)
    view_name = view.__class__.__name__ if view else 'UnknownView'

    # --- Domain errors: NotFound / InvalidArgument / Unauthorized / ActivationFailed ---
    if isinstance(exc, RbacError):
        logger.warning(f"[{view_name}] {exc.error_code}: {exc.message}")
        return error_response(exc)

    # DRF marks the atomic request for rollback on APIException
    exception_handler(exc, context)
    logger.error(f"[{view_name}] Exception: {exc}")

    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        return api_response(
            status_code=status.HTTP_401_UNAUTHORIZED,
            status="failure",
            data={},
            error_code="AUTH_ERROR",
            error_message="Authentication credentials were not provided or invalid.",
        )

    if isinstance(exc, PermissionDenied):
        return api_response(
            status_code=status.HTTP_403_FORBIDDEN,
            status="failure",
            data={},
            error_code="ACCESS_DENIED",
            error_message="You do not have permission to perform this action.",
        )

    if isinstance(exc, (ValidationError, SerializerValidationError)):
        return api_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            status="failure",
            data={},
            error_code="VALIDATION_ERROR",
            error_message=format_validation_error(exc.detail),
        )

    # NotFound, ParseError, MethodNotAllowed, ...
    if isinstance(exc, APIException):
        return api_response(
            status_code=getattr(exc, 'status_code', status.HTTP_500_INTERNAL_SERVER_ERROR),
            status="failure",
            data={},
            error_code="API_EXCEPTION",
            error_message=format_validation_error(exc.detail),
        )

    logger.exception("Unhandled Exception", exc_info=exc)
    return api_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        status="failure",
        data={},
        error_code="INTERNAL_SERVER_ERROR",
        error_message="An unexpected error occurred. Please try again later.",
    )
