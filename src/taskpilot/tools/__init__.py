"""Shell and git/GitHub gateway."""

from .git import GitClient, GitCommandResult, Issue
from .shell import ShellResult, ShellRunner

__all__ = [
    "GitClient",
    "GitCommandResult",
    "Issue",
    "ShellResult",
    "ShellRunner",
]
