"""Tests for the rotate-token command line interface."""

from datetime import UTC, datetime, timedelta
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from token_rotator.enums import StoreBackend
from token_rotator.exceptions import StoreError
from token_rotator.main import cli, load_settings
from token_rotator.stores.memory import InMemoryStore


@pytest.fixture
def cli_runner():
    """Create CLI runner for testing Click commands."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("STACK", "BACKEND", "WORK_DIR", "PASSPHRASE", "LOG_LEVEL"):
        monkeypatch.delenv(f"TOKEN_ROTATOR_{var}", raising=False)


@pytest.fixture
def mock_browser_open():
    with patch("token_rotator.utils.browser.webbrowser.open", return_value=True) as mock_open:
        yield mock_open


@pytest.fixture
def cli_store():
    """In-memory store handed to every command."""
    store = InMemoryStore()
    with (
        patch("token_rotator.cli.rotate.create_store", return_value=store) as rotate_factory,
        patch("token_rotator.cli.check.create_store", return_value=store),
    ):
        store.factory = rotate_factory
        yield store


class TestGroup:
    def test_help_lists_commands(self, cli_runner):
        result = cli_runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for command in ("npm", "github", "check"):
            assert command in result.output

    def test_npm_help(self, cli_runner):
        result = cli_runner.invoke(cli, ["npm", "--help"])

        assert result.exit_code == 0
        assert "--rotation-days" in result.output
        assert "--username" in result.output

    def test_settings_passed_to_store_factory(self, cli_runner, cli_store, mock_browser_open, tmp_path):
        result = cli_runner.invoke(
            cli,
            ["--stack", "staging", "--work-dir", str(tmp_path), "--backend", "memory", "npm"],
            input="abc123\n",
        )

        assert result.exit_code == 0
        settings = cli_store.factory.call_args.args[0]
        assert settings.stack == "staging"
        assert settings.work_dir == tmp_path
        assert settings.backend is StoreBackend.MEMORY

    def test_missing_settings_file(self, cli_runner, tmp_path):
        result = cli_runner.invoke(cli, ["--config", str(tmp_path / "nope.yaml"), "npm"])

        assert result.exit_code == 1
        assert "Configuration file not found" in result.output

    def test_unknown_log_level(self, cli_runner, cli_store):
        result = cli_runner.invoke(cli, ["--log-level", "verbose", "npm"], input="abc123\n")

        assert result.exit_code == 1
        assert "Invalid option" in result.output
        assert cli_store.keys() == []

    def test_unknown_log_level_from_environment(self, cli_runner, cli_store, monkeypatch):
        monkeypatch.setenv("TOKEN_ROTATOR_LOG_LEVEL", "verbose")

        result = cli_runner.invoke(cli, ["npm"], input="abc123\n")

        assert result.exit_code == 1
        assert "Invalid option" in result.output

    def test_lowercase_log_level(self, cli_runner, cli_store, mock_browser_open):
        result = cli_runner.invoke(cli, ["--log-level", "debug", "npm"], input="abc123\n")

        assert result.exit_code == 0, result.output
        assert cli_store.get("npm-token") == "abc123"


class TestNpmCommand:
    def test_rotates_token(self, cli_runner, cli_store, mock_browser_open):
        result = cli_runner.invoke(cli, ["npm", "--rotation-days", "30"], input="abc123\n")

        assert result.exit_code == 0, result.output
        assert cli_store.get("npm-token") == "abc123"
        assert cli_store.is_secret("npm-token")
        expires_at = datetime.fromisoformat(cli_store.get("npm-token-expires-at"))
        assert abs(expires_at - (datetime.now(UTC) + timedelta(days=30))) < timedelta(minutes=1)
        assert "Token npm-token updated!" in result.output
        mock_browser_open.assert_not_called()

    def test_username_opens_browser(self, cli_runner, cli_store, mock_browser_open):
        result = cli_runner.invoke(
            cli, ["npm", "--config-name", "npm", "--username", "my-username"], input="abc123\n"
        )

        assert result.exit_code == 0, result.output
        assert cli_store.get("npm") == "abc123"
        mock_browser_open.assert_called_once_with("https://www.npmjs.com/settings/my-username/tokens/", new=2)

    def test_empty_token_exits_non_zero(self, cli_runner, cli_store, mock_browser_open):
        result = cli_runner.invoke(cli, ["npm"], input="\n")

        assert result.exit_code == 1
        assert "Error: Token is required" in result.output
        assert cli_store.keys() == []

    @pytest.mark.parametrize("days", ["0", "36501"])
    def test_invalid_rotation_days(self, cli_runner, cli_store, days):
        result = cli_runner.invoke(cli, ["npm", "--rotation-days", days], input="abc123\n")

        assert result.exit_code == 2
        assert cli_store.keys() == []

    def test_store_failure_exits_non_zero(self, cli_runner, mock_browser_open):
        with patch("token_rotator.cli.rotate.create_store") as factory:
            factory.return_value.name = "pulumi"
            factory.return_value.set.side_effect = StoreError("pulumi config set failed: no stack", key="npm-token")

            result = cli_runner.invoke(cli, ["npm"], input="abc123\n")

        assert result.exit_code == 1
        assert "pulumi config set failed: no stack" in result.output


class TestGitHubCommand:
    def test_default_type_is_fine_grained(self, cli_runner, cli_store, mock_browser_open):
        result = cli_runner.invoke(cli, ["github", "--token-id", "1234567890"], input="ghp_abc\n")

        assert result.exit_code == 0, result.output
        assert cli_store.get("github-token") == "ghp_abc"
        mock_browser_open.assert_called_once_with(
            "https://github.com/settings/personal-access-tokens/1234567890", new=2
        )

    def test_classic_with_stored_token_id(self, cli_runner, cli_store, mock_browser_open):
        cli_store.set("small-github-token-id", "42")

        result = cli_runner.invoke(
            cli,
            ["github", "--type", "github-classic", "--config-name", "small-github-token"],
            input="ghp_abc\n",
        )

        assert result.exit_code == 0, result.output
        assert cli_store.get("small-github-token") == "ghp_abc"
        mock_browser_open.assert_called_once_with("https://github.com/settings/tokens/42", new=2)

    def test_browser_failure_does_not_abort(self, cli_runner, cli_store):
        with patch("token_rotator.utils.browser.webbrowser.open", side_effect=OSError("no display")):
            result = cli_runner.invoke(cli, ["github"], input="ghp_abc\n")

        assert result.exit_code == 0, result.output
        assert cli_store.get("github-token") == "ghp_abc"

    def test_invalid_type(self, cli_runner, cli_store):
        result = cli_runner.invoke(cli, ["github", "--type", "gitlab"], input="ghp_abc\n")

        assert result.exit_code == 2


class TestCheckCommand:
    def test_fresh_token_is_masked(self, cli_runner, cli_store):
        cli_store.set("npm-token", "npm_abcdefgh1234", secret=True)
        cli_store.set("npm-token-expires-at", (datetime.now(UTC) + timedelta(days=30)).isoformat())

        result = cli_runner.invoke(cli, ["check", "npm"])

        assert result.exit_code == 0, result.output
        assert "Value: npm_********1234" in result.output
        assert "npm_abcdefgh1234" not in result.output

    def test_show_value(self, cli_runner, cli_store):
        cli_store.set("github-token", "ghp_abcdefgh1234", secret=True)
        cli_store.set("github-token-expires-at", (datetime.now(UTC) + timedelta(days=30)).isoformat())

        result = cli_runner.invoke(cli, ["check", "github", "--show-value"])

        assert result.exit_code == 0
        assert "Value: ghp_abcdefgh1234" in result.output

    def test_old_token_fails_with_suggestion(self, cli_runner, cli_store):
        cli_store.set("npm-token", "tok", secret=True)
        cli_store.set("npm-token-expires-at", (datetime.now(UTC) - timedelta(days=20)).isoformat())

        result = cli_runner.invoke(cli, ["check", "npm", "--expiry-days", "10"])

        assert result.exit_code == 1
        assert "Token for npm expires on" in result.output
        assert "Suggestion: Run 'rotate-token npm'" in result.output

    def test_missing_expiry(self, cli_runner, cli_store):
        cli_store.set("npm-token", "tok", secret=True)

        result = cli_runner.invoke(cli, ["check", "npm"])

        assert result.exit_code == 1
        assert "No expiry date recorded" in result.output

    def test_expiry_days_out_of_range(self, cli_runner, cli_store):
        result = cli_runner.invoke(cli, ["check", "npm", "--expiry-days", "999999999"])

        assert result.exit_code == 2


class TestLoadSettings:
    def test_flags_override_file(self, tmp_path):
        config_file = tmp_path / "rotator.yaml"
        config_file.write_text("stack: dev\nbackend: memory\n")

        settings = load_settings(str(config_file), {"stack": "prod", "work_dir": None})

        assert settings.stack == "prod"
        assert settings.backend is StoreBackend.MEMORY
        assert settings.work_dir == Path(".")

    def test_no_overrides(self):
        assert load_settings(None, {"stack": None}).stack == "prod"
