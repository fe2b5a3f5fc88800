"""
Application error taxonomy

Every error raised by the service layer maps to one HTTP status and is
rendered by the handlers in quickbite.main as the standard JSON envelope.
"""
from typing import Optional


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None):
        self.message = message or self.default_message
        self.field = field
        super().__init__(self.message)

    @property
    def code(self) -> str:
        return type(self).__name__


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class ConflictError(AppError):
    status_code = 400
    default_message = "Resource already exists"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class Unauthenticated(AppError):
    status_code = 401
    default_message = "Access denied. No token provided."


class Unverified(AppError):
    status_code = 401
    default_message = "Access denied. Please verify your email first."


class Forbidden(AppError):
    status_code = 403
    default_message = "Access denied. Admin privileges required."


class InvalidCredentialsError(AppError):
    status_code = 401
    default_message = "Invalid credentials"


class UnverifiedAccountError(AppError):
    status_code = 403
    default_message = "Please verify your account"


class ExpiredError(AppError):
    status_code = 400
    default_message = "OTP expired. Please sign up again."


class InvalidCodeError(AppError):
    status_code = 400
    default_message = "Invalid OTP"


class InvalidStateError(AppError):
    status_code = 400
    default_message = "Order cannot be changed at this stage"


class BelowMinimumOrderError(AppError):
    status_code = 400
    default_message = "Order total is below the restaurant minimum"


class AlreadyRatedError(AppError):
    status_code = 400
    default_message = "Order already rated"


class InternalError(AppError):
    status_code = 500
