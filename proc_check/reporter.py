"""Render verdicts for humans and machines, and map them to exit statuses."""

import logging
from typing import Any

from proc_check.models.result import ExecutionResult, decode_output
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

EXIT_PASSED = 0
EXIT_FAILED = 1

STATUS_SYMBOLS = {
    "passed": "✅",
    "failed": "❌",
}


def status_of(verdict: Verdict) -> str:
    """Short status name of a verdict."""
    return "passed" if verdict.passed else "failed"


def exit_status_for(verdict: Verdict) -> int:
    """Process exit status to report for a verdict."""
    return EXIT_PASSED if verdict.passed else EXIT_FAILED


def describe(verdict: Verdict, result: ExecutionResult) -> str:
    """Build a multi-line, human-readable report of a verdict.

    Expected and actual values are shown as string literals so that
    whitespace and trailing newlines are visible. On failure the captured
    stdout and stderr follow the list of mismatches.
    """
    match verdict:
        case Passed():
            return "No errors."
        case Failed(mismatches=mismatches):
            lines = ["Errors."]
            for mismatch in mismatches:
                lines.extend(describe_mismatch(mismatch))
            if result.stdout is not None and result.stderr is not None:
                lines.append(f"stdout: {_render_bytes(result.stdout)}")
                lines.append(f"stderr: {_render_bytes(result.stderr)}")
            return "\n".join(lines)


def describe_mismatch(mismatch: Mismatch) -> list[str]:
    """Lines describing a single mismatch."""
    match mismatch:
        case StdoutMismatch(expected=expected, actual=actual):
            return [
                "Got unexpected stdout output.",
                f"  expected: {expected!r}",
                f"  got     : {_render_bytes(actual)}",
            ]
        case ExitCodeMismatch(expected=expected, actual=actual):
            return [f"Wrong or unexpected exit status: {actual}. Expected {expected}"]
        case SpawnFailure(cause=cause):
            return [f"Command could not be started ({cause.kind}): {cause}"]
        case TimeoutExpired(timeout=timeout):
            return [f"Command did not finish within {timeout:g}s and was killed"]


def to_json(verdict: Verdict, result: ExecutionResult) -> dict[str, Any]:
    """Format a verdict and its execution for JSON output."""
    return {
        "status": status_of(verdict),
        "duration": result.duration,
        "exit_status": str(result.exit_status) if result.exit_status else None,
        "mismatches": [_mismatch_to_json(m) for m in _mismatches(verdict)],
        "stdout": _text_or_none(result.stdout),
        "stdout_is_utf8": _is_utf8_or_none(result.stdout),
        "stderr": _text_or_none(result.stderr),
        "stderr_is_utf8": _is_utf8_or_none(result.stderr),
    }


def log_verdict(
    log: logging.Logger, verdict: Verdict, result: ExecutionResult
) -> None:
    """Log a one-line summary of a verdict."""
    status = status_of(verdict)
    log.info(
        "%s %s (%.2fs)",
        STATUS_SYMBOLS[status],
        status,
        result.duration,
    )
    for mismatch in _mismatches(verdict):
        log.info("  Mismatch: %s", mismatch.kind)


def _mismatch_to_json(mismatch: Mismatch) -> dict[str, Any]:
    match mismatch:
        case StdoutMismatch(expected=expected, actual=actual):
            decoded = decode_output(actual)
            return {
                "kind": mismatch.kind,
                "expected": expected,
                "actual": decoded.text,
                "actual_is_utf8": decoded.is_valid_utf8,
            }
        case ExitCodeMismatch(expected=expected, actual=actual):
            return {"kind": mismatch.kind, "expected": expected, "actual": str(actual)}
        case SpawnFailure(cause=cause):
            return {
                "kind": mismatch.kind,
                "reason": cause.kind,
                "executable": cause.executable,
                "message": cause.message,
            }
        case TimeoutExpired(timeout=timeout):
            return {"kind": mismatch.kind, "timeout": timeout}


def _render_bytes(data: bytes) -> str:
    decoded = decode_output(data)
    if decoded.is_valid_utf8:
        return repr(decoded.text)
    return f"{decoded.text!r} (not valid UTF-8)"


def _text_or_none(data: bytes | None) -> str | None:
    return decode_output(data).text if data is not None else None


def _is_utf8_or_none(data: bytes | None) -> bool | None:
    return decode_output(data).is_valid_utf8 if data is not None else None


def _mismatches(verdict: Verdict) -> tuple[Mismatch, ...]:
    return tuple(verdict.mismatches) if isinstance(verdict, Failed) else ()
