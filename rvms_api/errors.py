# rvms_api/errors.py
"""Service-level failures and the JSON error payload shared by all routes."""


def error(code: str, http: int, message: str, details=None):
    """Return a consistent JSON error payload with HTTP status."""
    payload = {"code": code, "message": message}
    if details is not None:
        payload["details"] = details
    return payload, http


class ServiceError(Exception):
    code = "service_error"
    status = 500


class NotFound(ServiceError):
    code = "not_found"
    status = 404


class Conflict(ServiceError):
    code = "conflict"
    status = 409


class Unauthorized(ServiceError):
    code = "unauthorized"
    status = 401
