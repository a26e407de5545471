"""Core services exports."""

from .email_validation import (
    DUPLICATE_EMAIL,
    EMAIL_CHECK_FAILED,
    INVALID_EMAIL,
    EmailValidationService,
    is_valid_email_format,
)
from .users_api import UsersApiClient

__all__ = [
    # Users API
    "UsersApiClient",
    # Email validation
    "EmailValidationService",
    "is_valid_email_format",
    "INVALID_EMAIL",
    "DUPLICATE_EMAIL",
    "EMAIL_CHECK_FAILED",
]
