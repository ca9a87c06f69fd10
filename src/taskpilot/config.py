"""Configuration constants.

Centralizes endpoints, storage locations and limits used across the package.
"""

from pathlib import Path


class LogLevel:
    """Log level constants with numeric values for comparison.

    Standard logging hierarchy: DEBUG < INFO < WARNING < ERROR
    Lower numeric value = more verbose (shows more messages).
    """

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40

    _names = {
        DEBUG: "DEBUG",
        INFO: "INFO",
        WARNING: "WARNING",
        ERROR: "ERROR",
    }

    _from_string = {
        "debug": DEBUG,
        "info": INFO,
        "warning": WARNING,
        "error": ERROR,
    }

    @classmethod
    def name(cls, level: int) -> str:
        """Get the name for a log level."""
        return cls._names.get(level, "UNKNOWN")

    @classmethod
    def from_string(cls, level_str: str) -> int:
        """Convert string to log level. Returns INFO if invalid."""
        return cls._from_string.get(level_str.lower(), cls.INFO)


# Model API
API_BASE_URL = "https://api.anthropic.com"
API_VERSION = "2023-06-01"
DEFAULT_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 4096
TASK_MAX_TOKENS = 8000

# Credential storage
CREDENTIALS_FILE = Path.home() / ".claude" / ".credentials.json"
KEYCHAIN_SERVICE = "Claude Code-credentials"
SECRET_STORE_SERVICE = "taskpilot"
SECRET_STORE_KEY = "claude-credentials"
DEFAULT_SCOPES = ["user:inference", "user:profile"]

# Interactive login
AUTHORIZE_URL = "https://claude.ai/login"
CALLBACK_HOST = "127.0.0.1"
CALLBACK_PATH = "/callback"
CALLBACK_PORT_RANGE = (49152, 65535)
LOGIN_TIMEOUT_SECONDS = 5 * 60
DEFAULT_EXPIRES_IN = 3600

# Workspace context
CONTEXT_FILE_PATTERNS = ["*.ts", "*.js", "*.py", "*.java", "*.go"]
CONTEXT_EXCLUDED_DIRS = {"node_modules", ".git", ".venv", "venv", "__pycache__"}
CONTEXT_MAX_FILES = 20

# Chat history
NEW_CHAT_TITLE = "New Chat"
TITLE_MAX_LENGTH = 50
HISTORY_MAX_SIZE = 50
DEFAULT_CHAT_DB = Path.home() / ".taskpilot" / "chat.db"
