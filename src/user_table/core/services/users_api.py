"""Async client for the users REST API."""

from __future__ import annotations

from types import TracebackType

import httpx
from loguru import logger
from pydantic import BaseModel, Field, TypeAdapter

from user_table.entities.user import User
from user_table.runtime.context import get_config

_USER_LIST = TypeAdapter(list[User])


class EmailCheckResponse(BaseModel):
    """Response of ``POST /users/check-email``."""

    is_unique: bool = Field(alias="isUnique")


class UsersApiClient:
    """Thin wrapper around the four users endpoints.

    Every call raises ``httpx.HTTPError`` on transport failures and non-2xx
    responses; callers decide how to surface them.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root; defaults to ``config.api.base_url``
            timeout: Request timeout in seconds; defaults to ``config.api.timeout_seconds``
            transport: Optional httpx transport, used by tests
        """
        api_config = get_config().api
        self.base_url = (base_url or api_config.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else api_config.timeout_seconds
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=transport
        )

    async def __aenter__(self) -> UsersApiClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list_users(self) -> list[User]:
        """``GET /users``: return the full user collection."""
        response = await self._client.get("/users")
        response.raise_for_status()
        users = _USER_LIST.validate_python(response.json())
        logger.debug(f"Fetched {len(users)} users from {self.base_url}")
        return users

    async def check_email(self, email: str) -> bool:
        """``POST /users/check-email``: whether no stored user has ``email``."""
        response = await self._client.post("/users/check-email", json={"email": email})
        response.raise_for_status()
        return EmailCheckResponse.model_validate(response.json()).is_unique

    async def create_users(self, users: list[User]) -> None:
        """``POST /users``: create all ``users`` in one request."""
        payload = {"users": [user.to_payload() for user in users]}
        response = await self._client.post("/users", json=payload)
        response.raise_for_status()
        logger.info(f"Created {len(users)} users")

    async def update_user(self, user: User) -> None:
        """``PUT /users/{id}``: replace one stored user with the full record."""
        if user.id is None:
            raise ValueError("Cannot update a user without an id")

        response = await self._client.put(f"/users/{user.id}", json=user.to_payload())
        response.raise_for_status()
        logger.info(f"Updated user {user.id}")
