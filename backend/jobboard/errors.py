"""
Error taxonomy for the job board API.

Every workflow raises one of these; ``main.py`` registers a handler that
renders them as ``{"error": message}`` with the matching status code.

    Unauthenticated  401  missing/invalid credential
    Forbidden        403  authenticated but not permitted
    NotFound         404  resource absent
    ValidationError  400  malformed or missing input
    Conflict         400  uniqueness violation (duplicate application/save)
    UpstreamFailure  400/500  store or identity provider error
    RequestTimeout   504  request exceeded the configured timeout
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Authentication required"


class Forbidden(AppError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFound(AppError):
    status_code = 404
    default_message = "Not found"


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid input"


class Conflict(AppError):
    status_code = 400
    default_message = "Resource already exists"


class UpstreamFailure(AppError):
    default_message = "Upstream service failure"

    def __init__(self, message: str = None, client_error: bool = False):
        super().__init__(message)
        self.client_error = client_error
        self.status_code = 400 if client_error else 500


class RequestTimeout(AppError):
    status_code = 504
    default_message = "Request timed out"
