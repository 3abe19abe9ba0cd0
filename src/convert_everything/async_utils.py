"""Async helpers for codec work and external tools.

Pillow and pypdf calls are synchronous, so converters hand them to
``run_blocking``. FFmpeg and ffprobe run through ``safe_subprocess``. Both
paths share one limiter so a burst of heavy conversions queues up instead
of starving the event loop.
"""

import asyncio
import functools
import logging
import weakref
from typing import Any, Callable, NamedTuple, TypeVar

from .config import config

logger = logging.getLogger(__name__)

T = TypeVar("T")

KILL_GRACE_SECONDS = 5.0


class ConcurrencyLimiter:
    """Caps how many heavy conversions run at once.

    asyncio semaphores are bound to the loop that first waits on them, so one
    semaphore is kept per running loop. Test suites create a loop per test.
    """

    def __init__(self, max_concurrent: int = 4):
        self.max_concurrent = max(1, max_concurrent)
        self._semaphores: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Semaphore]" = (
            weakref.WeakKeyDictionary()
        )

    def _semaphore(self) -> asyncio.Semaphore:
        loop = asyncio.get_running_loop()
        semaphore = self._semaphores.get(loop)
        if semaphore is None:
            semaphore = self._semaphores[loop] = asyncio.Semaphore(self.max_concurrent)
        return semaphore

    async def acquire(self) -> "ConcurrencyLimiter":
        await self._semaphore().acquire()
        return self

    def release(self) -> None:
        self._semaphore().release()

    async def __aenter__(self):
        return await self.acquire()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.release()


concurrency_limiter = ConcurrencyLimiter(config.max_concurrent)


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a synchronous codec call on the default executor, under the limiter."""
    async with concurrency_limiter:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))


class ProcessOutput(NamedTuple):
    """Exit status and decoded output of an external tool."""

    returncode: int
    stdout: str
    stderr: str

    def stderr_tail(self, limit: int = 500) -> str:
        """Last ``limit`` characters of stderr; FFmpeg prints the cause last."""
        return self.stderr.strip()[-limit:]


class SubprocessTimeoutError(RuntimeError):
    """An external tool ran past its time limit and was killed."""

    def __init__(self, cmd: list[str], timeout: int):
        self.cmd = cmd
        self.timeout = timeout
        super().__init__(f"{cmd[0]} timed out after {timeout}s")


class SubprocessError(RuntimeError):
    """An external tool exited with a non-zero status."""

    def __init__(self, cmd: list[str], returncode: int, stderr: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        message = f"{cmd[0]} exited with code {returncode}"
        if stderr:
            message += f": {stderr.strip()[-500:]}"
        super().__init__(message)


async def _reap(proc: asyncio.subprocess.Process, name: str) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        return
    try:
        await asyncio.wait_for(proc.wait(), timeout=KILL_GRACE_SECONDS)
    except asyncio.TimeoutError:
        logger.warning(f"{name} (pid {proc.pid}) did not exit after kill")


async def safe_subprocess(
    cmd: list[str],
    timeout: int = 1800,
    check_returncode: bool = True,
) -> ProcessOutput:
    """Run ``cmd`` to completion, killing it if it exceeds ``timeout``.

    Args:
        cmd: Executable and arguments.
        timeout: Seconds before the process is killed.
        check_returncode: Raise SubprocessError on a non-zero exit.

    Returns:
        ProcessOutput, which unpacks as ``(returncode, stdout, stderr)``.

    Raises:
        SubprocessTimeoutError: If the process exceeds the timeout.
        SubprocessError: If check_returncode is set and the process fails.
    """
    logger.debug(f"Running {' '.join(cmd)}")
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        await _reap(proc, cmd[0])
        raise SubprocessTimeoutError(cmd, timeout) from None
    except asyncio.CancelledError:
        await _reap(proc, cmd[0])
        raise

    output = ProcessOutput(
        proc.returncode or 0,
        stdout.decode(errors="replace") if stdout else "",
        stderr.decode(errors="replace") if stderr else "",
    )
    if check_returncode and output.returncode != 0:
        raise SubprocessError(cmd, output.returncode, output.stderr)
    return output
