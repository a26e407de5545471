"""Test configuration and fixtures for user-table."""

import pytest

from tests.fixtures import *  # noqa: F401,F403
from user_table.runtime import context


@pytest.fixture
def isolated_context():
    """Undo any ``set_config`` performed during the test."""
    token = context.set_context(context.get_context())
    yield
    context._app_context.reset(token)
