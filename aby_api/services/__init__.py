"""
Aby Business Services
Business logic for the management API, one package per module
"""

from .auth_service import AuthService
from .email_service import EmailService
from .file_storage import FileStorage

__all__ = [
    "AuthService",
    "EmailService",
    "FileStorage",
]
