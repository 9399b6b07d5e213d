"""Run a single command and capture its externally observable behaviour."""

import asyncio
import contextlib
import logging
import os
import shlex
import signal
import time
from collections.abc import Sequence

from proc_check.models.result import (
    AbnormalExit,
    ExecutionResult,
    ExitStatus,
    NormalExit,
    SpawnError,
    TimedOut,
)

log = logging.getLogger(__name__)

READ_CHUNK_SIZE = 64 * 1024
OUTPUT_DRAIN_GRACE = 1.0


async def execute(
    command: Sequence[str],
    *,
    timeout: float | None = None,
) -> ExecutionResult:
    """Run a command to completion and capture stdout, stderr and exit status.

    The executable is started directly, without a shell, with an empty stdin.
    Both output pipes are drained while the child runs, so output of any size
    is captured in full. With a timeout the child gets its own process group,
    and the whole group is killed when the timeout elapses.

    Args:
        command: Executable followed by its arguments (must not be empty)
        timeout: Seconds to wait before killing the child (None waits forever)

    Returns:
        The captured result. A command that cannot be started yields a result
        with ``spawn_error`` set instead of raising.

    """
    executable, *arguments = command
    own_group = timeout is not None and os.name == "posix"
    log.info("Running command: %s", shlex.join(command))
    started = time.monotonic()

    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *arguments,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=own_group,
        )
    except OSError as error:
        spawn_error = SpawnError.from_os_error(executable, error)
        log.warning("Command could not be started: %s", spawn_error)
        return ExecutionResult.spawn_failed(spawn_error)

    stdout = bytearray()
    stderr = bytearray()
    drains = (
        asyncio.create_task(_drain(process.stdout, stdout)),
        asyncio.create_task(_drain(process.stderr, stderr)),
    )

    try:
        if timeout is None:
            exit_status = _exit_status(await process.wait())
        else:
            exit_status = await _wait_with_timeout(process, timeout, own_group)

        if isinstance(exit_status, TimedOut):
            # A grandchild outside the killed group may still hold a pipe.
            done, pending = await asyncio.wait(drains, timeout=OUTPUT_DRAIN_GRACE)
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            for task in done:
                task.result()
        else:
            await asyncio.gather(*drains)
    finally:
        if process.returncode is None:
            _kill(process, own_group)
        for task in drains:
            task.cancel()

    duration = time.monotonic() - started
    log.info("Command finished: %s (%.2fs)", exit_status, duration)
    log.debug(
        "Captured %d byte(s) of stdout, %d of stderr", len(stdout), len(stderr)
    )

    return ExecutionResult(
        stdout=bytes(stdout),
        stderr=bytes(stderr),
        exit_status=exit_status,
        duration=duration,
    )


async def _wait_with_timeout(
    process: asyncio.subprocess.Process, timeout: float, own_group: bool
) -> ExitStatus:
    """Wait for the child to exit, killing it once the timeout elapses."""
    try:
        async with asyncio.timeout(timeout):
            returncode = await process.wait()
    except TimeoutError:
        log.warning("Command timed out after %ss, killing it", timeout)
        _kill(process, own_group)
        await process.wait()
        return TimedOut(timeout=timeout)
    return _exit_status(returncode)


def _exit_status(returncode: int) -> ExitStatus:
    if returncode < 0:
        return AbnormalExit(signal=-returncode)
    return NormalExit(code=returncode)


def _kill(process: asyncio.subprocess.Process, own_group: bool) -> None:
    """Send SIGKILL to the child, or to its whole process group."""
    with contextlib.suppress(ProcessLookupError):
        if own_group:
            os.killpg(process.pid, signal.SIGKILL)
        else:
            process.kill()


async def _drain(stream: asyncio.StreamReader | None, sink: bytearray) -> None:
    """Append everything read from a pipe to ``sink`` until EOF."""
    if stream is None:
        return
    while chunk := await stream.read(READ_CHUNK_SIZE):
        sink.extend(chunk)
