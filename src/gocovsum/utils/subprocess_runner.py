"""Subprocess execution with timeout and output capture.

Used for the single ``go list`` invocation; callers translate
``SubprocessError`` into their own domain errors.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)


@dataclass
class SubprocessResult:
    """Result of subprocess execution."""

    returncode: int
    """Exit code of the process."""

    stdout: str
    """Standard output captured from the process."""

    stderr: str
    """Standard error captured from the process."""

    timed_out: bool = False
    """True if the process was killed after the timeout."""

    duration_ms: float = 0.0
    """Wall-clock duration in milliseconds."""

    @property
    def success(self) -> bool:
        """Return True if the process exited with 0 before the timeout."""
        return self.returncode == 0 and not self.timed_out


class SubprocessError(Exception):
    """Exception raised when a subprocess cannot be started."""

    def __init__(self, message: str, result: SubprocessResult) -> None:
        """Initialize with error message and the synthesized result."""
        super().__init__(message)
        self.result = result


async def run_subprocess(
    command: Sequence[str],
    *,
    cwd: Path | None = None,
    timeout: float = 120.0,
) -> SubprocessResult:
    """Execute a command, capturing stdout and stderr separately.

    Args:
        command: Command and arguments (e.g. ``['go', 'list', '-json', 'fmt']``).
        cwd: Working directory. Defaults to the current directory.
        timeout: Maximum seconds to wait before the process is killed.

    Returns:
        SubprocessResult with exit code and decoded output.

    Raises:
        SubprocessError: If the executable does not exist or cannot be started.
        ValueError: If command is empty, timeout is not positive, or cwd is missing.
    """
    if not command:
        raise ValueError("Command cannot be empty")

    if timeout <= 0:
        raise ValueError(f"Timeout must be positive, got {timeout}")

    work_dir = cwd.resolve() if cwd else Path.cwd()
    if not work_dir.is_dir():
        raise ValueError(f"Working directory does not exist: {work_dir}")

    logger.debug(
        "Running subprocess: %s (cwd=%s, timeout=%s)",
        " ".join(str(c) for c in command),
        work_dir,
        timeout,
    )

    start_time = time.perf_counter()
    timed_out = False

    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            cwd=work_dir,
        )
    except (FileNotFoundError, PermissionError) as exc:
        logger.error("Cannot start command: %s", command[0])
        raise SubprocessError(
            f"Command not found: {command[0]}",
            result=SubprocessResult(returncode=-1, stdout="", stderr=str(exc)),
        ) from exc

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except TimeoutError:
        logger.warning("Subprocess timed out after %s seconds", timeout)
        timed_out = True
        try:
            process.kill()
            await process.wait()
        except ProcessLookupError:
            pass  # already exited
        stdout_bytes = b""
        stderr_bytes = b"Process timed out and was killed"

    duration_ms = (time.perf_counter() - start_time) * 1000
    returncode = process.returncode if process.returncode is not None else -1
    if timed_out and returncode == 0:
        returncode = -1

    result = SubprocessResult(
        returncode=returncode,
        stdout=stdout_bytes.decode("utf-8", errors="replace"),
        stderr=stderr_bytes.decode("utf-8", errors="replace"),
        timed_out=timed_out,
        duration_ms=duration_ms,
    )

    logger.debug(
        "Subprocess completed: returncode=%d, duration=%.2fms, success=%s",
        result.returncode,
        result.duration_ms,
        result.success,
    )
    return result
