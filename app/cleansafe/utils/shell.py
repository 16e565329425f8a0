"""Shell execution utilities.

Provides asyncio subprocess execution with a hard timeout, so a hanging
OS facility cannot stall a whole batch.
"""

import asyncio
import logging
import shutil
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


async def run_command(
    args: list[str],
    *,
    timeout: float | None = 10.0,
    cwd: str | None = None,
) -> CommandResult:
    """Execute a command and return the result.

    The command is run directly (no shell), so arguments never need
    shell quoting. On timeout the child process is killed before the
    exception propagates.

    Args:
        args: Command and arguments to execute.
        timeout: Maximum time in seconds to wait for the command.
        cwd: Working directory for the command. If None, uses current directory.

    Returns:
        CommandResult with stdout, stderr, and returncode.

    Raises:
        TimeoutError: If command exceeds timeout.
        FileNotFoundError: If command executable is not found.
    """
    process = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=cwd,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except TimeoutError:
        logger.warning("Command timed out after %ss: %s", timeout, args[0])
        process.kill()
        await process.wait()
        raise

    return CommandResult(
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
        returncode=process.returncode if process.returncode is not None else -1,
    )


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None
