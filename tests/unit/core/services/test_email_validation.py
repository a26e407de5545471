"""Tests for email format and uniqueness validation."""

import pytest

from user_table.core.services.email_validation import (
    DUPLICATE_EMAIL,
    EMAIL_CHECK_FAILED,
    INVALID_EMAIL,
    EmailValidationService,
    is_valid_email_format,
)


class TestEmailFormat:
    """Test the local format pattern."""

    @pytest.mark.parametrize(
        "email",
        ["a@b.co", "first.last@example.com", "x+tag@sub.domain.org"],
    )
    def test_valid(self, email):
        assert is_valid_email_format(email)

    @pytest.mark.parametrize(
        "email",
        ["", "plain", "@example.com", "user@", "user@domain", "a b@example.com", "a@@b.com", "a@b.c d"],
    )
    def test_invalid(self, email):
        assert not is_valid_email_format(email)


class TestEmailValidationService:
    """Test the combined format and uniqueness check."""

    @pytest.fixture
    def validator(self, api_client) -> EmailValidationService:
        return EmailValidationService(api_client)

    @pytest.mark.asyncio
    async def test_invalid_format_skips_network(self, validator, backend):
        assert await validator.validate("not-an-email") == INVALID_EMAIL
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_unique(self, validator, backend):
        assert await validator.validate("dana@example.com") is None
        assert backend.routes == ["POST /users/check-email"]

    @pytest.mark.asyncio
    async def test_duplicate(self, validator):
        assert await validator.validate("bob@example.com") == DUPLICATE_EMAIL

    @pytest.mark.asyncio
    async def test_backend_failure(self, validator, backend):
        backend.fail.add("POST /users/check-email")

        assert await validator.validate("dana@example.com") == EMAIL_CHECK_FAILED
