"""Sequential execution of model-proposed actions."""

import asyncio
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from ..errors import ActionError
from ..tools.shell import ShellRunner
from .actions import Action, CommandAction, FileDeleteAction, FileWriteAction


class ActionReport(BaseModel):
    """Outcome of one action.

    Attributes:
        action_type: The action tag
        target: File path or command line
        ok: Whether the action succeeded
        skipped: True for unknown actions that were not executed
        stdout: Captured standard output (commands only)
        stderr: Captured standard error (commands only)
    """

    action_type: str
    target: str = ""
    ok: bool = True
    skipped: bool = False
    stdout: str = Field(default="", repr=False)
    stderr: str = Field(default="", repr=False)


class ActionExecutor:
    """Applies actions to the workspace one at a time, in order.

    The first failing action raises ActionError and the rest are not run.
    Effects of earlier actions stay in place.
    """

    def __init__(
        self,
        workspace_root: str | Path,
        shell: ShellRunner | None = None,
        debug_callback: Any | None = None
    ):
        self._root = Path(workspace_root)
        self._shell = shell or ShellRunner(cwd=str(self._root))
        self._debug_callback = debug_callback

    def set_debug_callback(self, callback: Any) -> None:
        self._debug_callback = callback

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    def _resolve(self, path: str) -> Path:
        return self._root / path

    async def execute(self, actions: list[Action]) -> list[ActionReport]:
        """Execute actions sequentially.

        Returns:
            One report per action

        Raises:
            ActionError: On the first failing action
        """
        reports: list[ActionReport] = []
        for action in actions:
            self._debug("info", "executor", f"Executing: {action.type or '<untyped>'}")
            reports.append(await self._execute_one(action))
        return reports

    async def _execute_one(self, action: Action) -> ActionReport:
        if isinstance(action, FileWriteAction):
            return await self._write_file(action)
        if isinstance(action, FileDeleteAction):
            return await self._delete_file(action)
        if isinstance(action, CommandAction):
            return await self._run_command(action)

        self._debug("warning", "executor", f"Unknown action type: {action.type or '<untyped>'}")
        return ActionReport(action_type=action.type, ok=False, skipped=True)

    async def _write_file(self, action: FileWriteAction) -> ActionReport:
        target = self._resolve(action.path)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(action.content, encoding="utf-8", newline="")

        try:
            await asyncio.to_thread(_write)
        except OSError as e:
            self._debug("error", "executor", f"Write failed: {action.path}: {e}")
            raise ActionError(action.type, f"{action.path}: {e}") from e

        self._debug("info", "executor", f"Wrote: {action.path}")
        return ActionReport(action_type=action.type, target=action.path)

    async def _delete_file(self, action: FileDeleteAction) -> ActionReport:
        target = self._resolve(action.path)
        try:
            existed = await asyncio.to_thread(target.exists)
            if existed:
                await asyncio.to_thread(target.unlink, missing_ok=True)
        except OSError as e:
            self._debug("error", "executor", f"Delete failed: {action.path}: {e}")
            raise ActionError(action.type, f"{action.path}: {e}") from e

        if existed:
            self._debug("info", "executor", f"Deleted: {action.path}")
        else:
            self._debug("info", "executor", f"Already absent: {action.path}")
        return ActionReport(action_type=action.type, target=action.path)

    async def _run_command(self, action: CommandAction) -> ActionReport:
        try:
            result = await self._shell.run(action.cmd, cwd=str(self._root))
        except OSError as e:
            self._debug("error", "executor", f"Command failed to start: {action.cmd}: {e}")
            raise ActionError(action.type, f"{action.cmd}: {e}") from e

        self._debug("info", "executor", f"Command: {action.cmd}")
        if result.stdout.strip():
            self._debug("info", "executor", f"Output: {result.stdout.strip()}")
        if result.stderr.strip():
            self._debug("info", "executor", f"Stderr: {result.stderr.strip()}")

        if not result.success:
            self._debug("error", "executor", f"Command failed with exit code {result.exit_code}")
            raise ActionError(
                action.type,
                f"'{action.cmd}' exited with code {result.exit_code}",
                stdout=result.stdout,
                stderr=result.stderr,
                exit_code=result.exit_code,
            )

        return ActionReport(
            action_type=action.type,
            target=action.cmd,
            stdout=result.stdout,
            stderr=result.stderr,
        )
