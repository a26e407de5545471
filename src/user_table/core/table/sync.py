"""Keeps the table state in step with the users API."""

from __future__ import annotations

import asyncio
from types import TracebackType

import httpx
from loguru import logger
from pydantic import ValidationError

from user_table.core.services.email_validation import EmailValidationService
from user_table.core.services.users_api import UsersApiClient
from user_table.core.table.state import RowKey, SortState, TableState
from user_table.entities.user import normalize_field
from user_table.runtime.context import get_config

FETCH_ERROR = "Error fetching users"
SAVE_ERROR = "Error saving users"


class SaveBlockedError(RuntimeError):
    """Raised when saving while an email validation error is pending."""


class UserTableController:
    """Fetch, edit, validate and save operations over a ``TableState``.

    Network failures never escape ``fetch`` and ``save``; they are logged and
    turned into ``state.error_message`` for the view to show.
    """

    def __init__(
        self,
        api_client: UsersApiClient | None = None,
        state: TableState | None = None,
        email_validator: EmailValidationService | None = None,
    ):
        self.api = api_client or UsersApiClient()
        self.state = state or TableState(
            sort=SortState(field=get_config().table.default_sort_field)
        )
        self.email_validator = email_validator or EmailValidationService(self.api)

    async def __aenter__(self) -> UserTableController:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.api.aclose()

    async def mount(self) -> bool:
        """Initial load of the table."""
        return await self.fetch()

    async def fetch(self) -> bool:
        """Replace persisted rows with the backend's collection.

        Drafts, dirty cells and email errors are discarded on success. On
        failure the previous rows stay and the alert is set.
        """
        try:
            users = await self.api.list_users()
        except (httpx.HTTPError, ValidationError, ValueError) as e:
            logger.error(f"Fetching users failed: {e}")
            self.state.error_message = FETCH_ERROR
            return False

        self.state.replace_rows(users)
        self.state.error_message = None
        return True

    async def sort_by(self, field_name: str) -> SortState:
        sort = self.state.toggle_sort(field_name)
        logger.debug(f"Sorting by {sort.field} {sort.direction.value if sort.direction else '-'}")
        await self.fetch()
        return self.state.sort

    def add_row(self) -> RowKey:
        return self.state.add_draft()

    async def edit_cell(self, key: RowKey, field_name: str, value: str) -> None:
        """Apply an edit; email edits are validated before returning."""
        field_name = normalize_field(field_name)
        self.state.set_cell(key, field_name, value)
        if field_name == "email":
            await self.check_email(key, value)

    async def check_email(self, key: RowKey, email: str) -> str | None:
        """Validate ``email`` for the row at ``key`` and record the result.

        A result is dropped when the cell no longer holds ``email`` by the
        time the check completes.
        """
        if not key.is_draft and self.state.fetched_emails.get(key.value) == email:
            # A row keeps its own stored address.
            self.state.set_email_error(key, None)
            return None

        error = await self.email_validator.validate(email)

        try:
            current = self.state.get_row(key).email
        except KeyError:
            logger.debug(f"Row {key} disappeared during email check, ignoring result")
            return error
        if current != email:
            logger.debug(f"Stale email check for row {key} ignored")
            return error

        self.state.set_email_error(key, error)
        return error

    async def save(self) -> bool:
        """Create drafts and update edited rows, then re-fetch.

        Drafts go out in one batch create, each edited persisted row in its
        own full-record update. The first failing request fails the whole
        save; nothing is rolled back.

        Raises:
            SaveBlockedError: If any email validation error is set.
        """
        if self.state.has_errors:
            raise SaveBlockedError("Fix the email errors before saving")

        to_create, to_update = self.state.partition_for_save()
        logger.info(f"Saving {len(to_create)} new and {len(to_update)} modified users")

        calls = []
        if to_create:
            calls.append(self.api.create_users(to_create))
        calls.extend(self.api.update_user(user) for user in to_update)

        try:
            await asyncio.gather(*calls)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Saving users failed: {e}")
            self.state.error_message = SAVE_ERROR
            return False

        self.state.new_users = []
        self.state.dirty_cells = {}
        await self.fetch()
        return True

    def undo(self) -> bool:
        """Undo is not supported; kept so the toolbar action has a target."""
        logger.info("Undo is not supported")
        return False
