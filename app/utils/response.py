# response.py
from rest_framework.response import Response


def api_response(status_code=0, status="success", data=None, error_code=None, error_message=None, errors=None):
    """
    Standardized API response
    """
    body = {
        "statusCode": status_code,
        "status": status,
        "data": data if data is not None else {},
        "errorCode": error_code,
        "errorMessage": error_message,
    }
    if errors:
        body["errors"] = list(errors)
    return Response(body)


def error_response(exc):
    """
    Envelope for a domain error carrying ``error_code``, ``http_status`` and ``message``.
    """
    data = {"retryable": True} if getattr(exc, "retryable", False) else {}
    return api_response(
        status_code=exc.http_status,
        status="failure",
        data=data,
        error_code=exc.error_code,
        error_message=exc.message,
        errors=getattr(exc, "errors", None),
    )
