import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..errors import ShellCommandError


@dataclass
class GitCommandResult:
    returncode: int
    stdout: str
    stderr: str


@dataclass
class Issue:
    number: int
    title: str
    body: str

    def as_task(self) -> str:
        """Render the issue as a task description for the orchestrator."""
        return f"Work on GitHub issue #{self.number}: {self.title}\n\nDescription:\n{self.body}"


async def _run(cmd: list[str], cwd: str | None = None) -> GitCommandResult:
    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError:
        return GitCommandResult(127, "", f"{cmd[0]}: command not found")
    stdout, stderr = await process.communicate()
    return GitCommandResult(process.returncode, stdout.decode(errors="replace"), stderr.decode(errors="replace"))


class GitClient:
    """Git and GitHub CLI helpers bound to one workspace.

    Arguments are passed as argv lists, never through a shell, so titles and
    messages need no quoting.
    """

    def __init__(self, repo_root: str, debug_callback: Any | None = None):
        self.repo_root = str(Path(repo_root).resolve())
        self._debug_callback = debug_callback

    def _debug(self, level: str, component: str, message: str) -> None:
        if self._debug_callback:
            self._debug_callback(level, component, message)

    async def _git(self, *args: str) -> GitCommandResult:
        return await _run(["git", *args], cwd=self.repo_root)

    async def _gh(self, *args: str) -> GitCommandResult:
        return await _run(["gh", *args], cwd=self.repo_root)

    @staticmethod
    def _check(cmd: str, result: GitCommandResult) -> GitCommandResult:
        if result.returncode != 0:
            raise ShellCommandError(cmd, result.returncode, result.stderr)
        return result

    async def status(self) -> str | None:
        """Human-readable ``git status``, or None outside a repository."""
        result = await self._git("status")
        return result.stdout.strip() if result.returncode == 0 else None

    async def status_porcelain(self) -> str:
        return (await self._git("status", "--porcelain")).stdout

    async def current_branch(self) -> str | None:
        result = await self._git("rev-parse", "--abbrev-ref", "HEAD")
        return result.stdout.strip() if result.returncode == 0 else None

    async def checkout_branch(self, branch_name: str) -> GitCommandResult:
        """Create and switch to a new branch."""
        result = self._check(
            f"git checkout -b {branch_name}", await self._git("checkout", "-b", branch_name)
        )
        self._debug("info", "git", f"Created branch: {branch_name}")
        return result

    async def commit(self, message: str) -> GitCommandResult:
        """Stage everything and commit."""
        self._check("git add -A", await self._git("add", "-A"))
        result = self._check("git commit", await self._git("commit", "-m", message))
        self._debug("info", "git", f"Committed: {message}")
        return result

    async def push(self) -> GitCommandResult:
        """Push the current branch, setting upstream on first push."""
        branch = await self.current_branch()
        if not branch:
            raise ShellCommandError("git push", 1, "Failed to discover current branch")
        result = self._check("git push", await self._git("push", "-u", "origin", branch))
        self._debug("info", "git", "Pushed to remote")
        return result

    async def create_pr(self, title: str, body: str) -> str:
        """Open a pull request for the current branch.

        Returns:
            The PR URL printed by gh
        """
        result = self._check(
            "gh pr create", await self._gh("pr", "create", "--title", title, "--body", body)
        )
        self._debug("info", "git", f"Created PR: {title}")
        return result.stdout.strip()

    async def view_issue(self, number: int) -> Issue:
        """Fetch an issue's title and body through gh."""
        cmd = f"gh issue view {number}"
        result = self._check(
            cmd, await self._gh("issue", "view", str(number), "--json", "number,title,body")
        )
        try:
            raw = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise ShellCommandError(cmd, result.returncode, f"Invalid JSON from gh: {e}") from e
        if not isinstance(raw, dict):
            raise ShellCommandError(cmd, result.returncode, "Expected a JSON object from gh")
        return Issue(
            number=int(raw.get("number", number)),
            title=raw.get("title", ""),
            body=raw.get("body") or "",
        )
