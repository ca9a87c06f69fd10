import asyncio
import os
import time
from dataclasses import dataclass

from ..errors import ShellCommandError


@dataclass
class ShellResult:
    success: bool
    exit_code: int
    stdout: str
    stderr: str
    duration_ms: int
    command: str
    cwd: str


class ShellRunner:
    """Execute shell commands in a working directory and capture outputs.

    Commands run through the system shell with the caller's full privileges;
    there is no sandboxing.
    """

    def __init__(self, cwd: str | None = None):
        self.default_cwd = cwd or os.getcwd()

    async def run(
        self,
        command: str,
        *,
        cwd: str | None = None,
        env_overrides: dict[str, str] | None = None,
        timeout: float | None = None,
        check: bool = False,
    ) -> ShellResult:
        """Run a command string through the shell.

        Args:
            command: Shell command line
            cwd: Working directory (defaults to the runner's)
            env_overrides: Extra environment variables
            timeout: Seconds before the process is killed
            check: Raise ShellCommandError on a non-zero exit

        Raises:
            OSError: If the shell could not be spawned
            asyncio.TimeoutError: If the timeout elapsed
            ShellCommandError: On a non-zero exit when ``check`` is set
        """
        start_time = time.time()
        effective_cwd = cwd or self.default_cwd
        env = os.environ.copy()
        if env_overrides:
            env.update(env_overrides)

        process = await asyncio.create_subprocess_shell(
            command,
            cwd=effective_cwd,
            env=env,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise

        result = ShellResult(
            success=process.returncode == 0,
            exit_code=process.returncode,
            stdout=stdout.decode(errors="replace"),
            stderr=stderr.decode(errors="replace"),
            duration_ms=int((time.time() - start_time) * 1000),
            command=command,
            cwd=effective_cwd,
        )
        if check and not result.success:
            raise ShellCommandError(command, result.exit_code, result.stderr)
        return result
