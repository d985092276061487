"""
Custom Application Exceptions
"""
from fastapi import status


class AbyException(Exception):
    """Base exception for the Aby application"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
        self.message = message


class NotFoundError(AbyException):
    """Raised when a requested record does not exist"""
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(AbyException):
    """Raised when data validation fails"""
    status_code = status.HTTP_400_BAD_REQUEST


class BusinessLogicError(AbyException):
    """Raised when business rules are violated (illegal status transitions, quantities)"""
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(AbyException):
    """Raised when a unique value is already taken"""
    status_code = status.HTTP_409_CONFLICT


class AuthenticationError(AbyException):
    """Raised when credentials are missing or invalid"""
    status_code = status.HTTP_401_UNAUTHORIZED


class InsufficientPermissionsError(AbyException):
    """Raised when the caller's role may not perform the action"""
    status_code = status.HTTP_403_FORBIDDEN
