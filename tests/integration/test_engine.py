"""Tests for the execution engine against real processes."""

import signal

import pytest

from proc_check.engine import OUTPUT_DRAIN_GRACE, execute
from proc_check.models.result import AbnormalExit, NormalExit, TimedOut

from .conftest import WriteScriptFn


async def test_captures_stdout_and_exit_code() -> None:
    """Captures stdout and a normal exit code."""
    result = await execute(["sh", "-c", "echo hello world && exit 1"])

    assert result.spawn_error is None
    assert result.stdout == b"hello world\n"
    assert result.stderr == b""
    assert result.exit_status == NormalExit(code=1)
    assert result.duration > 0


async def test_captures_stderr_separately() -> None:
    """Stdout and stderr are captured independently."""
    result = await execute(["sh", "-c", "echo out; echo err >&2"])

    assert result.stdout == b"out\n"
    assert result.stderr == b"err\n"


@pytest.mark.parametrize("code", [0, 2, 255])
async def test_exit_code_range(code: int) -> None:
    """Exit codes across the 0-255 range are reported as given."""
    result = await execute(["sh", "-c", f"exit {code}"])

    assert result.exit_status == NormalExit(code=code)


async def test_no_shell_expansion() -> None:
    """Arguments reach the program literally."""
    result = await execute(["echo", "$HOME", "*", "a;b"])

    assert result.stdout == b"$HOME * a;b\n"


async def test_stdin_is_empty() -> None:
    """The child reads an empty stdin instead of blocking."""
    result = await execute(["cat"])

    assert result.stdout == b""
    assert result.exit_status == NormalExit(code=0)


async def test_preserves_non_utf8_bytes() -> None:
    """Bytes that are not UTF-8 are captured unchanged."""
    result = await execute(["printf", "\\377\\376\\n"])

    assert result.stdout == b"\xff\xfe\n"


async def test_large_output_on_both_pipes() -> None:
    """Output larger than a pipe buffer on both streams is fully captured."""
    size = 1024 * 1024
    result = await execute(
        [
            "sh",
            "-c",
            f"head -c {size} /dev/zero >&2; head -c {size} /dev/zero",
        ]
    )

    assert result.exit_status == NormalExit(code=0)
    assert result.stdout is not None and len(result.stdout) == size
    assert result.stderr is not None and len(result.stderr) == size


async def test_waits_for_child_to_finish() -> None:
    """Execution blocks until the child has exited."""
    result = await execute(["sh", "-c", "sleep 0.2; echo done"])

    assert result.stdout == b"done\n"
    assert result.duration >= 0.2


async def test_killed_by_signal_is_abnormal() -> None:
    """A child killed by a signal reports abnormal termination."""
    result = await execute(["sh", "-c", "kill -9 $$"])

    assert result.exit_status == AbnormalExit(signal=signal.SIGKILL)


async def test_nonexistent_executable() -> None:
    """A missing executable becomes a spawn error, not an exception."""
    result = await execute(["/nonexistent-binary-xyz"])

    assert result.spawn_error is not None
    assert result.spawn_error.kind == "not-found"
    assert result.spawn_error.executable == "/nonexistent-binary-xyz"
    assert result.stdout is None
    assert result.exit_status is None


async def test_executable_not_on_path() -> None:
    """A bare name that is not on PATH is not found."""
    result = await execute(["proc-check-no-such-program"])

    assert result.spawn_error is not None
    assert result.spawn_error.kind == "not-found"


async def test_permission_denied(write_script: WriteScriptFn) -> None:
    """A file without execute permission cannot be started."""
    script = write_script("tool.sh", "echo hi", executable=False)

    result = await execute([str(script)])

    assert result.spawn_error is not None
    assert result.spawn_error.kind == "permission-denied"


async def test_runs_script_with_arguments(write_script: WriteScriptFn) -> None:
    """Executables are started directly with their arguments."""
    script = write_script("args.sh", 'printf "%s|" "$@"')

    result = await execute([str(script), "a b", "c"])

    assert result.stdout == b"a b|c|"


async def test_timeout_kills_child() -> None:
    """A child running past the timeout is killed and marked as timed out."""
    result = await execute(["sleep", "10"], timeout=0.2)

    assert result.exit_status == TimedOut(timeout=0.2)
    assert result.duration < 5


async def test_timeout_keeps_partial_output() -> None:
    """Output written before the timeout is kept."""
    result = await execute(["sh", "-c", "echo started; exec sleep 10"], timeout=0.5)

    assert result.exit_status == TimedOut(timeout=0.5)
    assert result.stdout == b"started\n"


async def test_timeout_not_reached() -> None:
    """A child finishing in time reports its own exit status."""
    result = await execute(["sh", "-c", "exit 4"], timeout=5)

    assert result.exit_status == NormalExit(code=4)


async def test_timeout_kills_background_children() -> None:
    """Background children are killed with the command and release the pipes."""
    result = await execute(["sh", "-c", "sleep 10 & echo started; wait"], timeout=0.3)

    assert result.exit_status == TimedOut(timeout=0.3)
    assert result.stdout == b"started\n"
    assert result.duration < OUTPUT_DRAIN_GRACE
