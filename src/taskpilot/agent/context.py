"""Workspace context for task prompts."""

import asyncio
import fnmatch
import os
from pathlib import Path

from ..config import CONTEXT_EXCLUDED_DIRS, CONTEXT_FILE_PATTERNS, CONTEXT_MAX_FILES
from ..tools.git import GitClient


class ContextBuilder:
    """Builds the text context blob embedded in a task prompt.

    Hidden design decisions:
    - Which files are listed and how many
    - Which directories are skipped
    - How VCS state is reported
    """

    def __init__(
        self,
        workspace_root: str | Path,
        git: GitClient | None = None,
        patterns: list[str] | None = None,
        excluded_dirs: set[str] | None = None,
        max_files: int = CONTEXT_MAX_FILES
    ):
        self._root = Path(workspace_root).resolve()
        self._git = git or GitClient(str(self._root))
        self._patterns = patterns or list(CONTEXT_FILE_PATTERNS)
        self._excluded_dirs = excluded_dirs if excluded_dirs is not None else set(CONTEXT_EXCLUDED_DIRS)
        self._max_files = max_files

    def list_files(self) -> list[str]:
        """List matching workspace files as POSIX paths relative to the root.

        Walks the tree in sorted order and stops at ``max_files``.
        """
        found: list[str] = []
        for dirpath, dirnames, filenames in os.walk(self._root):
            dirnames[:] = sorted(d for d in dirnames if d not in self._excluded_dirs)
            for filename in sorted(filenames):
                if not any(fnmatch.fnmatch(filename, p) for p in self._patterns):
                    continue
                relative = (Path(dirpath) / filename).relative_to(self._root)
                found.append(relative.as_posix())
                if len(found) >= self._max_files:
                    return found
        return found

    async def build(self) -> str:
        """Build the context text: file listing plus git status if any."""
        files = await asyncio.to_thread(self.list_files)

        lines = ["Files in workspace:"]
        lines.extend(f"- {f}" for f in files)

        git_status = await self._git.status()
        if git_status:
            lines.append("\nGit status:")
            lines.append(git_status)

        return "\n".join(lines)
