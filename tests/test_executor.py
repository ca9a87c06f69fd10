"""Tests for the action executor."""
from pathlib import Path

import pytest

from taskpilot.agent import (
    ActionExecutor,
    CommandAction,
    FileDeleteAction,
    FileWriteAction,
    UnknownAction,
)
from taskpilot.errors import ActionError


class TestFileActions:
    """Tests for file_write and file_delete."""

    @pytest.fixture
    def executor(self, workspace, debug_callback):
        """Create an executor bound to the workspace."""
        return ActionExecutor(workspace, debug_callback=debug_callback)

    @pytest.mark.asyncio
    async def test_write_creates_parent_directories(self, executor, workspace):
        """Test that writing into missing folders creates them."""
        await executor.execute([FileWriteAction(path="src/deep/x.txt", content="hello")])
        assert (workspace / "src" / "deep" / "x.txt").read_text(encoding="utf-8") == "hello"

    @pytest.mark.asyncio
    async def test_write_preserves_content_exactly(self, executor, workspace):
        """Test that line endings and unicode are written byte for byte."""
        content = "line one\r\nline two\nüñí\n"
        await executor.execute([FileWriteAction(path="a.txt", content=content)])
        assert (workspace / "a.txt").read_bytes() == content.encode("utf-8")

    @pytest.mark.asyncio
    async def test_write_overwrites(self, executor, workspace):
        """Test that an existing file is replaced."""
        (workspace / "a.txt").write_text("old")
        await executor.execute([FileWriteAction(path="a.txt", content="new")])
        assert (workspace / "a.txt").read_text() == "new"

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self, executor, workspace, log_records):
        """Test that deleting twice succeeds and the file is gone."""
        (workspace / "gone.txt").write_text("bye")

        reports = await executor.execute([
            FileDeleteAction(path="gone.txt"),
            FileDeleteAction(path="gone.txt"),
        ])

        assert not (workspace / "gone.txt").exists()
        assert all(r.ok for r in reports)
        assert ("info", "executor", "Deleted: gone.txt") in log_records
        assert ("info", "executor", "Already absent: gone.txt") in log_records

    @pytest.mark.asyncio
    async def test_write_logs_progress(self, executor, log_records):
        """Test the executing/wrote log lines."""
        await executor.execute([FileWriteAction(path="x.txt", content="")])
        assert ("info", "executor", "Executing: file_write") in log_records
        assert ("info", "executor", "Wrote: x.txt") in log_records


class TestCommandActions:
    """Tests for command actions."""

    @pytest.mark.asyncio
    async def test_command_runs_in_workspace(self, workspace):
        """Test that commands run with the workspace as cwd."""
        executor = ActionExecutor(workspace)
        reports = await executor.execute([CommandAction(cmd="pwd")])
        assert Path(reports[0].stdout.strip()).resolve() == workspace.resolve()

    @pytest.mark.asyncio
    async def test_command_output_is_logged(self, workspace, debug_callback, log_records):
        """Test that stdout is reported and logged."""
        executor = ActionExecutor(workspace, debug_callback=debug_callback)
        reports = await executor.execute([CommandAction(cmd="echo hello")])

        assert reports[0].stdout == "hello\n"
        assert ("info", "executor", "Command: echo hello") in log_records
        assert ("info", "executor", "Output: hello") in log_records

    @pytest.mark.asyncio
    async def test_failing_command_stops_the_run(self, workspace):
        """Test that later actions never run after a failing command."""
        executor = ActionExecutor(workspace)

        with pytest.raises(ActionError) as exc_info:
            await executor.execute([
                FileWriteAction(path="A.txt", content="a"),
                CommandAction(cmd="echo oops >&2; exit 3"),
                FileWriteAction(path="B.txt", content="b"),
            ])

        assert (workspace / "A.txt").exists()
        assert not (workspace / "B.txt").exists()
        assert exc_info.value.exit_code == 3
        assert exc_info.value.action_type == "command"
        assert "oops" in exc_info.value.stderr


class TestUnknownActions:
    """Tests for skipped actions."""

    @pytest.mark.asyncio
    async def test_unknown_action_is_skipped(self, workspace, debug_callback, log_records):
        """Test that unknown actions warn and do not stop the run."""
        executor = ActionExecutor(workspace, debug_callback=debug_callback)

        reports = await executor.execute([
            UnknownAction(type="rename", raw={"type": "rename"}),
            FileWriteAction(path="after.txt", content="ok"),
        ])

        assert reports[0].skipped
        assert reports[1].ok and not reports[1].skipped
        assert (workspace / "after.txt").exists()
        assert ("warning", "executor", "Unknown action type: rename") in log_records
