"""Compare a captured execution against the expectations of a test."""

from proc_check.models.result import ExecutionResult, NormalExit, TimedOut
from proc_check.models.spec import TestSpec
from proc_check.models.verdict import (
    ExitCodeMismatch,
    Failed,
    Mismatch,
    Passed,
    SpawnFailure,
    StdoutMismatch,
    TimeoutExpired,
    Verdict,
)


def compare(spec: TestSpec, result: ExecutionResult) -> Verdict:
    """Decide whether an execution satisfies a test specification.

    A spawn failure or a timeout is reported on its own, since nothing else
    about the run can be trusted. Otherwise stdout is checked before the exit
    code and every failing check is reported. Expectations set to ``None`` are
    not checked.
    """
    if result.spawn_error is not None:
        return Failed(mismatches=[SpawnFailure(cause=result.spawn_error)])

    exit_status = result.exit_status
    if isinstance(exit_status, TimedOut):
        return Failed(mismatches=[TimeoutExpired(timeout=exit_status.timeout)])

    if result.stdout is None or exit_status is None:
        raise ValueError("Execution result carries no output and no spawn error")

    mismatches: list[Mismatch] = []

    if spec.expected_stdout is not None:
        if spec.expected_stdout.encode("utf-8") != result.stdout:
            mismatches.append(
                StdoutMismatch(expected=spec.expected_stdout, actual=result.stdout)
            )

    if spec.expected_exit_code is not None:
        if not (
            isinstance(exit_status, NormalExit)
            and exit_status.code == spec.expected_exit_code
        ):
            mismatches.append(
                ExitCodeMismatch(expected=spec.expected_exit_code, actual=exit_status)
            )

    if mismatches:
        return Failed(mismatches=mismatches)
    return Passed()
