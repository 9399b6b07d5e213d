"""Models for the captured outcome of running a command."""

from dataclasses import dataclass
from signal import Signals
from typing import Literal

SpawnErrorKind = Literal["not-found", "permission-denied", "other"]


@dataclass(frozen=True, kw_only=True)
class NormalExit:
    """The process returned an exit code."""

    code: int

    def __str__(self) -> str:
        return f"exit code {self.code}"


@dataclass(frozen=True, kw_only=True)
class AbnormalExit:
    """The process did not exit normally, e.g. it was killed by a signal."""

    signal: int | None = None

    def __str__(self) -> str:
        if self.signal is None:
            return "abnormal termination"
        try:
            name = Signals(self.signal).name
        except ValueError:
            name = f"signal {self.signal}"
        return f"killed by {name}"


@dataclass(frozen=True, kw_only=True)
class TimedOut:
    """The process was killed after running longer than the allowed time."""

    timeout: float

    def __str__(self) -> str:
        return f"timed out after {self.timeout:g}s"


ExitStatus = NormalExit | AbnormalExit | TimedOut


@dataclass(frozen=True, kw_only=True)
class SpawnError:
    """OS-level reason a command could not be started."""

    kind: SpawnErrorKind
    executable: str
    message: str
    errno: int | None = None

    def __str__(self) -> str:
        return f"{self.executable}: {self.message}"

    @classmethod
    def from_os_error(cls, executable: str, error: OSError) -> "SpawnError":
        """Classify an ``OSError`` raised while starting a process."""
        kind: SpawnErrorKind
        if isinstance(error, FileNotFoundError):
            kind = "not-found"
        elif isinstance(error, PermissionError):
            kind = "permission-denied"
        else:
            kind = "other"
        return cls(
            kind=kind,
            executable=executable,
            message=error.strerror or str(error),
            errno=error.errno,
        )


@dataclass(frozen=True, kw_only=True)
class ExecutionResult:
    """Outcome of a single execution attempt.

    Either ``spawn_error`` is set and nothing was captured, or the process ran
    and ``stdout``, ``stderr`` and ``exit_status`` are all present.
    """

    stdout: bytes | None = None
    stderr: bytes | None = None
    exit_status: ExitStatus | None = None
    spawn_error: SpawnError | None = None
    duration: float = 0.0

    def __post_init__(self) -> None:
        captured = (self.stdout, self.stderr, self.exit_status)
        if self.spawn_error is not None:
            if any(field is not None for field in captured):
                raise ValueError("A spawn failure cannot carry captured output")
        elif any(field is None for field in captured):
            raise ValueError("stdout, stderr and exit_status are required")

    @classmethod
    def spawn_failed(cls, error: SpawnError) -> "ExecutionResult":
        """Build the result of a command that could not be started."""
        return cls(spawn_error=error)


@dataclass(frozen=True, kw_only=True)
class DecodedOutput:
    """Captured bytes rendered as text for display."""

    text: str
    is_valid_utf8: bool


def decode_output(data: bytes) -> DecodedOutput:
    """Decode captured output, escaping bytes that are not valid UTF-8."""
    try:
        return DecodedOutput(text=data.decode("utf-8"), is_valid_utf8=True)
    except UnicodeDecodeError:
        return DecodedOutput(
            text=data.decode("utf-8", errors="backslashreplace"),
            is_valid_utf8=False,
        )
