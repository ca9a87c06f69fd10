"""Error taxonomy shared by every taskpilot component.

None of these errors is retried automatically; a failed login, request or task
run has to be started again by the caller.
"""


class TaskpilotError(Exception):
    """Base class for taskpilot errors."""

    def is_retryable(self) -> bool:
        """Override in subclasses to control retry behavior."""
        return False


class AuthError(TaskpilotError):
    """Missing, expired or invalid credentials (recoverable by logging in)."""


class NotAuthenticatedError(AuthError):
    """No credentials were found in any backend."""

    def __init__(self, message: str = "Not authenticated. Run `taskpilot login` first."):
        super().__init__(message)


class TokenExpiredError(AuthError):
    """The stored access token is past its expiry time."""

    def __init__(self, message: str = "Token expired. Run `taskpilot login` again."):
        super().__init__(message)


class ApiError(TaskpilotError):
    """Non-success HTTP response from the model API."""

    def __init__(self, status_code: int, status_text: str, body: str = ""):
        msg = f"Claude API error: {status_code} {status_text}".rstrip()
        if body:
            msg += f": {body}"
        super().__init__(msg)
        self.status_code = status_code
        self.status_text = status_text
        self.body = body


class ParseError(TaskpilotError):
    """The model output did not contain a valid action contract."""

    def __init__(self, message: str):
        super().__init__(f"Could not parse model response: {message}")


class ActionError(TaskpilotError):
    """A single action failed and aborted the rest of the run."""

    def __init__(
        self,
        action_type: str,
        message: str,
        stdout: str = "",
        stderr: str = "",
        exit_code: int | None = None
    ):
        super().__init__(f"Action '{action_type}' failed: {message}")
        self.action_type = action_type
        self.stdout = stdout
        self.stderr = stderr
        self.exit_code = exit_code


class AuthFlowError(TaskpilotError):
    """Interactive login failed, timed out or was cancelled."""


class NoWorkspaceError(TaskpilotError):
    """A task run was requested without a usable workspace folder."""

    def __init__(self, message: str = "No workspace folder open"):
        super().__init__(message)


class ShellCommandError(TaskpilotError):
    """A gateway helper command exited non-zero or printed unusable output."""

    def __init__(self, command: str, exit_code: int, stderr: str = ""):
        if exit_code:
            msg = f"Command failed with exit code {exit_code}: {command}"
        else:
            msg = f"Command returned unexpected output: {command}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
