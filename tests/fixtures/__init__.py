"""Shared pytest fixtures and helpers."""

from .backend import FakeUsersBackend  # noqa: F401
from .users import *  # noqa: F401,F403
