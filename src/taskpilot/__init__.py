"""
Taskpilot: an agent that turns natural-language tasks into file edits and
shell commands using Claude, plus a persistent streaming chat.

Each subpackage hides one design decision: credential storage (auth), the
model transport (llm), subprocess access (tools), the task loop (agent) and
conversation persistence (chat).
"""

__version__ = "0.1.0"

from .agent import TaskOrchestrator, TaskResult, TaskRun, TaskState, parse_task_result
from .auth import CredentialStore, Credentials, LoginFlow, create_credential_store
from .chat import ChatSession, create_chat_store
from .errors import (
    ActionError,
    ApiError,
    AuthError,
    AuthFlowError,
    NoWorkspaceError,
    NotAuthenticatedError,
    ParseError,
    TaskpilotError,
    TokenExpiredError,
)
from .llm import ChatMessage, ClaudeClient

__all__ = [
    "ActionError",
    "ApiError",
    "AuthError",
    "AuthFlowError",
    "ChatMessage",
    "ChatSession",
    "ClaudeClient",
    "CredentialStore",
    "Credentials",
    "LoginFlow",
    "NoWorkspaceError",
    "NotAuthenticatedError",
    "ParseError",
    "TaskOrchestrator",
    "TaskResult",
    "TaskRun",
    "TaskState",
    "TaskpilotError",
    "TokenExpiredError",
    "create_chat_store",
    "create_credential_store",
    "parse_task_result",
]
