"""End-to-end task runs.

One run goes through the stages:

    idle -> building_context -> awaiting_model -> parsing_response
         -> executing_actions -> done

Any stage may fail, which moves the run to ``failed`` and re-raises the
stage's error to the caller. Runs are not retried and must not overlap on the
same workspace.
"""

from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from ..config import TASK_MAX_TOKENS
from ..errors import NoWorkspaceError
from ..llm import ChatMessage, LLMProvider
from ..prompts import render_task_prompt
from ..tools.git import GitClient
from ..tools.shell import ShellRunner
from .actions import TaskResult
from .context import ContextBuilder
from .executor import ActionExecutor, ActionReport
from .parser import parse_task_result


class TaskState(str, Enum):
    """Stages of a task run."""

    IDLE = "idle"
    BUILDING_CONTEXT = "building_context"
    AWAITING_MODEL = "awaiting_model"
    PARSING_RESPONSE = "parsing_response"
    EXECUTING_ACTIONS = "executing_actions"
    DONE = "done"
    FAILED = "failed"


class TaskRun(BaseModel):
    """Record of one task run.

    Attributes:
        task: The task description
        state: Current or final stage
        prompt: Prompt sent to the model
        response_text: Raw model reply
        result: Parsed action contract
        reports: Per-action outcomes, in execution order
        error: Error message if the run failed
    """

    task: str
    state: TaskState = TaskState.IDLE
    prompt: str | None = None
    response_text: str | None = None
    result: TaskResult | None = None
    reports: list[ActionReport] = Field(default_factory=list)
    error: str | None = None

    @property
    def summary(self) -> str:
        return self.result.summary if self.result else ""


class TaskOrchestrator:
    """Runs a task from workspace context to executed actions.

    Hidden design decisions:
    - Prompt template and token budget
    - Stage ordering and failure bookkeeping
    - Wiring of context builder, parser and executor
    """

    def __init__(
        self,
        llm: LLMProvider,
        workspace_root: str | Path | None,
        shell: ShellRunner | None = None,
        git: GitClient | None = None,
        max_tokens: int = TASK_MAX_TOKENS,
        debug_callback: Any | None = None
    ):
        """Initialize the orchestrator.

        Args:
            llm: Model client
            workspace_root: Workspace folder; None means no workspace is open
            shell: Shell runner for command actions
            git: Git client used for context and issue lookup
            max_tokens: Token budget for the task reply
            debug_callback: Optional callable(level, component, message)
        """
        self._llm = llm
        self._root = Path(workspace_root).resolve() if workspace_root else None
        self._shell = shell
        self._git = git
        self._max_tokens = max_tokens
        self._debug_callback = debug_callback
        self.last_run: TaskRun | None = None

    def set_debug_callback(self, callback: Any) -> None:
        self._debug_callback = callback

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    def _transition(self, run: TaskRun, state: TaskState) -> None:
        self._debug("debug", "task", f"{run.state.value} -> {state.value}")
        run.state = state

    def _require_workspace(self) -> Path:
        if self._root is None or not self._root.is_dir():
            raise NoWorkspaceError()
        return self._root

    def _git_client(self, root: Path) -> GitClient:
        if self._git is None:
            self._git = GitClient(str(root), debug_callback=self._debug_callback)
        return self._git

    async def execute_task(self, task: str) -> TaskRun:
        """Run a task end to end.

        Returns:
            The completed TaskRun

        Raises:
            NoWorkspaceError: If no workspace folder is bound
            AuthError: If the model client has no valid credentials
            ApiError: If the model API rejected the request
            ParseError: If the reply held no valid action contract
            ActionError: If an action failed (earlier actions are kept)
        """
        run = TaskRun(task=task)
        self.last_run = run
        self._debug("info", "task", f"Starting task: {task}")

        try:
            self._transition(run, TaskState.BUILDING_CONTEXT)
            root = self._require_workspace()
            context = await ContextBuilder(root, git=self._git_client(root)).build()
            run.prompt = render_task_prompt(task, context)

            self._transition(run, TaskState.AWAITING_MODEL)
            self._debug("info", "task", "Thinking...")
            run.response_text = await self._llm.send(
                [ChatMessage(role="user", content=run.prompt)],
                max_tokens=self._max_tokens,
            )

            self._transition(run, TaskState.PARSING_RESPONSE)
            run.result = parse_task_result(run.response_text)
            self._debug("debug", "task", f"Parsed {len(run.result.actions)} actions")

            self._transition(run, TaskState.EXECUTING_ACTIONS)
            executor = ActionExecutor(root, shell=self._shell, debug_callback=self._debug_callback)
            run.reports = await executor.execute(run.result.actions)

            self._transition(run, TaskState.DONE)
        except Exception as e:
            run.error = str(e)
            self._transition(run, TaskState.FAILED)
            self._debug("error", "task", f"Error: {e}")
            raise

        self._debug("info", "task", f"Task completed: {run.summary}")
        return run

    async def run_issue(self, number: int) -> TaskRun:
        """Fetch a GitHub issue through gh and run it as a task."""
        root = self._require_workspace()
        issue = await self._git_client(root).view_issue(number)
        return await self.execute_task(issue.as_task())
