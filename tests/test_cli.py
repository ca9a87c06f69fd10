"""Tests for the command-line interface."""
import pytest
from rich.console import Console
from typer.testing import CliRunner

from taskpilot.cli import app
from taskpilot.cli.log import ConsoleLog
from taskpilot.config import LogLevel

runner = CliRunner()


@pytest.fixture
def chat_env(tmp_path):
    """Return environment variables pointing the chat store at a temp file."""
    return {
        "TASKPILOT_CHAT_BACKEND": "sqlite",
        "TASKPILOT_CHAT_DB": str(tmp_path / "chat.db"),
    }


class TestChatCommands:
    """Tests for the chat history commands."""

    def test_history_empty(self, chat_env):
        """Test the message shown when nothing is archived."""
        result = runner.invoke(app, ["history"], env=chat_env)
        assert result.exit_code == 0
        assert "No saved conversations" in result.output

    def test_new_chat_then_history(self, chat_env):
        """Test that new-chat on an empty conversation archives nothing."""
        result = runner.invoke(app, ["new-chat"], env=chat_env)
        assert result.exit_code == 0
        assert "Started a new chat" in result.output

        result = runner.invoke(app, ["history"], env=chat_env)
        assert "No saved conversations" in result.output

    def test_open_unknown_chat(self, chat_env):
        """Test that an unknown conversation id exits with code 1."""
        result = runner.invoke(app, ["open-chat", "nope"], env=chat_env)
        assert result.exit_code == 1
        assert "No conversation with ID nope" in result.output

    def test_clear_history_confirmed(self, chat_env):
        """Test clearing history with --yes."""
        result = runner.invoke(app, ["clear-history", "--yes"], env=chat_env)
        assert result.exit_code == 0
        assert "Chat history cleared" in result.output

    def test_clear_history_aborted(self, chat_env):
        """Test that answering no leaves history alone."""
        result = runner.invoke(app, ["clear-history"], input="n\n", env=chat_env)
        assert result.exit_code == 0
        assert "Aborted" in result.output


class TestTaskCommand:
    """Tests for task error reporting."""

    def test_missing_workspace_fails(self, tmp_path):
        """Test that a task in a missing folder prints an error and exits 1."""
        result = runner.invoke(
            app,
            ["task", "do something", "--workspace", str(tmp_path / "missing")],
            env={"TASKPILOT_CREDENTIALS_FILE": str(tmp_path / "creds.json")},
        )
        assert result.exit_code == 1
        assert "Error: No workspace folder open" in result.output


class TestConsoleLog:
    """Tests for the console log renderer."""

    def test_filters_below_threshold(self):
        """Test that entries under the level are dropped."""
        console = Console(record=True, width=200)
        log = ConsoleLog(console, log_level=LogLevel.INFO)

        log("debug", "task", "hidden detail")
        log("info", "task", "Starting task: x")
        log("warning", "executor", "Unknown action type: [rename]")

        output = console.export_text()
        assert "hidden detail" not in output
        assert "[task] Starting task: x" in output
        assert "Unknown action type: [rename]" in output

    def test_debug_level_shows_everything(self):
        """Test that the debug threshold keeps every entry."""
        console = Console(record=True, width=200)
        log = ConsoleLog(console, log_level=LogLevel.from_string("DEBUG"))
        log("debug", "llm", "POST /v1/messages")
        assert "POST /v1/messages" in console.export_text()
