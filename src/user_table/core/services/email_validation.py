"""Email format and uniqueness validation."""

import re

import httpx
from loguru import logger
from pydantic import ValidationError

from user_table.core.services.users_api import UsersApiClient

# local part, "@", domain containing a dot; no whitespace, no second "@"
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

INVALID_EMAIL = "Email is invalid"
DUPLICATE_EMAIL = "Email Address is not unique"
EMAIL_CHECK_FAILED = "Error checking email"


def is_valid_email_format(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


class EmailValidationService:
    """Validate an email cell value, returning an error message or ``None``."""

    def __init__(self, api_client: UsersApiClient):
        self._api_client = api_client

    async def validate(self, email: str) -> str | None:
        """Check format locally, then uniqueness against the backend.

        The backend is only consulted for well-formed addresses.
        """
        if not is_valid_email_format(email):
            return INVALID_EMAIL

        try:
            is_unique = await self._api_client.check_email(email)
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.warning(f"Email uniqueness check failed for {email!r}: {e}")
            return EMAIL_CHECK_FAILED

        return None if is_unique else DUPLICATE_EMAIL
