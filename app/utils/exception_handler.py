import logging
from rest_framework.views import exception_handler
from rest_framework.exceptions import (
    APIException,
    ValidationError,
    NotAuthenticated,
    AuthenticationFailed,
    PermissionDenied
)
from rest_framework import status
from app.platform.rbac.exceptions import RBACError
from app.utils.response import api_response

logger = logging.getLogger(__name__)


def format_validation_error(error_detail):
    """
    Convert DRF ValidationError detail into a readable error message.

    Handles:
    - Dict format: {'role': [ErrorDetail(...)]} -> "Role: "X" is not a valid choice."
    - List format: [ErrorDetail(...)] -> "..."
    - String format: "error message" -> "error message"
    """
    if isinstance(error_detail, dict):
        messages = []
        for field, errors in error_detail.items():
            if not isinstance(errors, (list, tuple)):
                errors = [errors]
            error_strings = [str(error) for error in errors]
            field_name = field.replace('_', ' ').title()
            messages.append(f"{field_name}: {', '.join(error_strings)}")
        return ". ".join(messages)

    if isinstance(error_detail, list):
        return ". ".join(str(error) for error in error_detail)

    return str(error_detail)


def custom_exception_handler(exc, context):
    """
    Global DRF exception handler.
    Ensures ALL API errors use the api_response() format.
    """
    view = context.get('view', None)
    view_name = view.__class__.__name__ if view else 'UnknownView'

    # --- RBAC programming errors: fail loudly, never allow or deny ---
    if isinstance(exc, RBACError):
        logger.exception(f"[{view_name}] RBAC configuration error: {exc}", exc_info=exc)
        return api_response(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            status="failure",
            data={},
            error_code="RBAC_CONFIGURATION_ERROR",
            error_message="An unexpected error occurred. Please try again later."
        )

    # Let DRF handle built-in exceptions first (sets auth headers etc.)
    response = exception_handler(exc, context)
    logger.warning(f"[{view_name}] Exception: {exc}")

    # --- Handle Auth Errors ---
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        api_resp = api_response(
            status_code=status.HTTP_401_UNAUTHORIZED,
            status="failure",
            data={},
            error_code="AUTH_ERROR",
            error_message="Authentication credentials were not provided or invalid."
        )
        if response is not None and 'WWW-Authenticate' in response:
            api_resp['WWW-Authenticate'] = response['WWW-Authenticate']
        return api_resp

    # --- Handle Permission Denied ---
    if isinstance(exc, PermissionDenied):
        return api_response(
            status_code=status.HTTP_403_FORBIDDEN,
            status="failure",
            data={},
            error_code="PERMISSION_DENIED",
            error_message=str(exc.detail)
        )

    # --- Handle Validation Errors ---
    if isinstance(exc, ValidationError):
        return api_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            status="failure",
            data={},
            error_code="VALIDATION_ERROR",
            error_message=format_validation_error(exc.detail)
        )

    # --- Handle other DRF API Exceptions (like NotFound, MethodNotAllowed, etc.) ---
    if isinstance(exc, APIException):
        return api_response(
            status_code=exc.status_code,
            status="failure",
            data={},
            error_code="API_EXCEPTION",
            error_message=format_validation_error(exc.detail)
        )

    # --- Handle Unexpected Server Errors ---
    logger.exception("Unhandled Exception", exc_info=exc)
    return api_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        status="failure",
        data={},
        error_code="INTERNAL_SERVER_ERROR",
        error_message="An unexpected error occurred. Please try again later."
    )
