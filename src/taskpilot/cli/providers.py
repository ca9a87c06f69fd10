"""Provider factory functions for CLI.

Centralizes creation of the credential store, model client and chat store
from environment variables. Hides configuration details from command
implementations.
"""

import os
from pathlib import Path

from rich.console import Console

from ..auth import CredentialStore, create_credential_store
from ..chat import ChatStore, create_chat_store
from ..config import DEFAULT_CHAT_DB, DEFAULT_MODEL, LogLevel
from ..llm import ClaudeClient
from .log import ConsoleLog

# Default console for output
_console = Console()


def get_logger(console: Console | None = None) -> ConsoleLog:
    """Create the console log renderer.

    Environment variables:
        TASKPILOT_LOG_LEVEL: debug, info, warning or error (default: info)
    """
    level = LogLevel.from_string(os.getenv("TASKPILOT_LOG_LEVEL", "info"))
    return ConsoleLog(console or _console, log_level=level)


def get_credential_store(debug_callback: ConsoleLog | None = None) -> CredentialStore:
    """Create the credential store with the standard backend chain.

    Environment variables:
        TASKPILOT_CREDENTIALS_FILE: Flat-file location (default: ~/.claude/.credentials.json)
    """
    return create_credential_store(
        credentials_file=os.getenv("TASKPILOT_CREDENTIALS_FILE") or None,
        debug_callback=debug_callback,
    )


def get_llm(store: CredentialStore, debug_callback: ConsoleLog | None = None) -> ClaudeClient:
    """Create the model client.

    Environment variables:
        TASKPILOT_MODEL: Model name (default: claude-sonnet-4-20250514)
    """
    return ClaudeClient(
        store,
        model=os.getenv("TASKPILOT_MODEL", DEFAULT_MODEL),
        debug_callback=debug_callback,
    )


def get_chat_store() -> ChatStore:
    """Create the chat store from environment variables.

    Returns:
        Chat store instance (not yet connected)

    Environment variables:
        TASKPILOT_CHAT_BACKEND: memory or sqlite (default: sqlite)
        TASKPILOT_CHAT_DB: SQLite file (default: ~/.taskpilot/chat.db)
    """
    backend = os.getenv("TASKPILOT_CHAT_BACKEND", "sqlite").lower()
    if backend == "sqlite":
        return create_chat_store(
            "sqlite",
            path=Path(os.getenv("TASKPILOT_CHAT_DB") or DEFAULT_CHAT_DB).expanduser(),
        )
    return create_chat_store(backend)
