"""Exception taxonomy for asmcc."""

from __future__ import annotations


class AsmccError(RuntimeError):
    """Base class for asmcc errors."""


class ConfigResolutionError(AsmccError):
    """Raised when part of the run configuration cannot be resolved.

    Callers recover locally (e.g. by falling back to a built-in template).
    """


class PipelineFailure(AsmccError):
    """A pipeline stage exited unsuccessfully.

    Failures are terminal for the current pipeline run only; they are
    returned inside a ``PipelineResult`` and drive the retry prompt.
    """

    kind = "pipeline-failed"

    def __init__(self, stage: str, returncode: int | None = None) -> None:
        self.stage = stage
        self.returncode = returncode
        detail = f"exit status {returncode}" if returncode is not None else "could not be started"
        super().__init__(f"{self.kind}: stage {stage!r} {detail}")


class PrimaryCompileFailure(PipelineFailure):
    kind = "primary-compile-failed"


class EncodingStageFailure(PipelineFailure):
    kind = "encoding-stage-failed"


class DemangleStageFailure(PipelineFailure):
    kind = "demangle-stage-failed"


class UserAbort(AsmccError):
    """The user declined to retry after a failed compilation."""

    exit_code = 1

    def __init__(self, message: str = "Compilation failed and retry was declined") -> None:
        super().__init__(message)


__all__ = [
    "AsmccError",
    "ConfigResolutionError",
    "DemangleStageFailure",
    "EncodingStageFailure",
    "PipelineFailure",
    "PrimaryCompileFailure",
    "UserAbort",
]
