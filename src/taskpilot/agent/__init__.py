"""Autonomous task execution: context, prompting, parsing, actions."""

from .actions import (
    Action,
    CommandAction,
    FileDeleteAction,
    FileWriteAction,
    TaskResult,
    UnknownAction,
)
from .context import ContextBuilder
from .executor import ActionExecutor, ActionReport
from .orchestrator import TaskOrchestrator, TaskRun, TaskState
from .parser import extract_json_candidate, parse_task_result

__all__ = [
    "Action",
    "ActionExecutor",
    "ActionReport",
    "CommandAction",
    "ContextBuilder",
    "FileDeleteAction",
    "FileWriteAction",
    "TaskOrchestrator",
    "TaskResult",
    "TaskRun",
    "TaskState",
    "UnknownAction",
    "extract_json_candidate",
    "parse_task_result",
]
