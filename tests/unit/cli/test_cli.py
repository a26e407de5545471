"""Tests for the user-table command line."""

import pytest
from rich.console import Console
from typer.testing import CliRunner

from user_table.cli import main as cli_main
from user_table.core.services.users_api import UsersApiClient
from user_table.core.table.sync import UserTableController
from user_table.runtime.context import get_config

runner = CliRunner()


@pytest.fixture
def fake_api(backend, monkeypatch, isolated_context):
    """Route every controller the CLI builds to the fake backend."""

    def make_controller():
        client = UsersApiClient(base_url=get_config().api.base_url, transport=backend.transport)
        return UserTableController(api_client=client)

    monkeypatch.setattr(cli_main, "UserTableController", make_controller)
    monkeypatch.setattr(cli_main, "console", Console(width=160))
    monkeypatch.setattr(cli_main, "configure_logging", lambda level=None: None)
    return backend


class TestListCommand:
    """Test ``user-table list``."""

    def test_lists_users(self, fake_api):
        result = runner.invoke(cli_main.app, ["list"])

        assert result.exit_code == 0, result.output
        assert "carol@example.com" in result.output
        assert fake_api.routes == ["GET /users"]

    def test_sorted_descending(self, fake_api):
        result = runner.invoke(cli_main.app, ["list", "--sort", "firstName", "--desc"])

        assert result.exit_code == 0, result.output
        assert "First Name ↓" in result.output
        assert result.output.index("Carol") < result.output.index("Bob") < result.output.index("Alice")

    def test_unknown_sort_field(self, fake_api):
        result = runner.invoke(cli_main.app, ["list", "--sort", "salary"])

        assert result.exit_code != 0
        assert fake_api.requests == []

    def test_fetch_failure_exits_nonzero(self, fake_api):
        fake_api.fail.add("GET /users")

        result = runner.invoke(cli_main.app, ["list"])

        assert result.exit_code == 1
        assert "Error fetching users" in result.output

    def test_base_url_option(self, fake_api):
        result = runner.invoke(cli_main.app, ["--base-url", "http://other.test/", "list"])

        assert result.exit_code == 0, result.output
        assert str(fake_api.requests[0].url) == "http://other.test/users"

    def test_log_level_is_case_insensitive(self, fake_api, monkeypatch):
        levels = []
        monkeypatch.setattr(cli_main, "configure_logging", levels.append)

        result = runner.invoke(cli_main.app, ["--log-level", "debug", "list"])

        assert result.exit_code == 0, result.output
        assert levels == ["DEBUG"]

    def test_unknown_log_level_is_a_usage_error(self, fake_api):
        result = runner.invoke(cli_main.app, ["--log-level", "foo", "list"])

        assert result.exit_code == 2
        assert "foo" in result.output
        assert fake_api.requests == []


class TestEditCommand:
    """Test ``user-table edit``."""

    def test_session_add_and_save(self, fake_api):
        commands = "add\nset new-1 firstName Dana\nset new-1 email dana@example.com\nsave\nquit\n"

        result = runner.invoke(cli_main.app, ["edit"], input=commands)

        assert result.exit_code == 0, result.output
        assert "Saved" in result.output
        assert fake_api.users[-1]["firstName"] == "Dana"
        assert fake_api.users[-1]["id"] == 4

    def test_session_ends_on_eof(self, fake_api):
        result = runner.invoke(cli_main.app, ["edit"], input="")

        assert result.exit_code == 0, result.output
