"""In-process fake of the users REST API built on ``httpx.MockTransport``."""

from __future__ import annotations

import json
from typing import Any

import httpx


class FakeUsersBackend:
    """Serves ``/users`` from a list of dicts and records every request.

    Routes listed in ``fail`` (``"GET /users"``, ``"PUT /users/2"``, ...)
    answer with HTTP 500.
    """

    def __init__(self, users: list[dict[str, Any]] | None = None):
        self.users: list[dict[str, Any]] = [dict(user) for user in users or []]
        self.requests: list[httpx.Request] = []
        self.fail: set[str] = set()
        self._next_id = max((user["id"] for user in self.users), default=0) + 1

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def routes(self) -> list[str]:
        return [f"{request.method} {request.url.path}" for request in self.requests]

    def bodies(self, route: str) -> list[Any]:
        return [
            json.loads(request.content)
            for request in self.requests
            if f"{request.method} {request.url.path}" == route
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = f"{request.method} {request.url.path}"

        if route in self.fail:
            return httpx.Response(500, json={"message": "Internal Server Error"})

        if route == "GET /users":
            return httpx.Response(200, json=self.users)

        if route == "POST /users/check-email":
            email = json.loads(request.content)["email"]
            taken = {user["email"] for user in self.users}
            return httpx.Response(200, json={"isUnique": email not in taken})

        if route == "POST /users":
            created = []
            for user in json.loads(request.content)["users"]:
                record = {**user, "id": self._next_id}
                self._next_id += 1
                self.users.append(record)
                created.append(record)
            return httpx.Response(201, json=created)

        if request.method == "PUT" and request.url.path.startswith("/users/"):
            user_id = int(request.url.path.rsplit("/", 1)[1])
            for index, user in enumerate(self.users):
                if user["id"] == user_id:
                    self.users[index] = {**json.loads(request.content), "id": user_id}
                    return httpx.Response(200, json=self.users[index])
            return httpx.Response(404, json={"message": "Not Found"})

        return httpx.Response(404, json={"message": "Not Found"})
