"""Edit / compile / retry loop.

The loop is an explicit state machine::

    EDITING --edit--> COMPILING --success--> SUCCEEDED
       ^                  |
       +---- retry <------+----- declined --> ABORTED

It starts in COMPILING when the caller already supplied a snippet and in
EDITING otherwise. Every failure that the user chooses to retry goes back
to EDITING, however the run started. There is no retry limit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Protocol

from .compilation.pipeline import PipelineResult
from .errors import UserAbort
from .options import CompilerConfig

_LOGGER = logging.getLogger(__name__)

RETRY_PROMPT = "Compilation failed, try again?"


class RetryState(str, Enum):
    EDITING = "editing"
    COMPILING = "compiling"
    SUCCEEDED = "succeeded"
    ABORTED = "aborted"


class Runner(Protocol):
    def run(self, source_path: Path | str, config: CompilerConfig) -> PipelineResult:
        ...


EditStep = Callable[[Path], None]
ConfirmStep = Callable[[str, bool], bool]


def ask_yes_no(prompt: str, default: bool, read: Callable[[str], str] = input) -> bool:
    """Ask a yes/no question; anything unrecognised selects ``default``."""
    answer = read(f"{prompt} {'[Y/n]' if default else '[y/N]'}:").strip()
    if not answer:
        return default
    if answer[0] in "Yy":
        return True
    if answer[0] in "Nn":
        return False
    return default


@dataclass(slots=True)
class RetryOutcome:
    state: RetryState
    output: bytes | None = None
    attempts: int = 0

    @property
    def succeeded(self) -> bool:
        return self.state is RetryState.SUCCEEDED

    def unwrap(self) -> bytes:
        """Return the captured output or raise ``UserAbort``."""
        if self.state is not RetryState.SUCCEEDED or self.output is None:
            raise UserAbort()
        return self.output


class RetryLoop:
    def __init__(self, runner: Runner, edit: EditStep, confirm: ConfirmStep = ask_yes_no) -> None:
        self.runner = runner
        self.edit = edit
        self.confirm = confirm

    def run(self, snippet_path: Path, config: CompilerConfig, *, start_editing: bool = True) -> RetryOutcome:
        state = RetryState.EDITING if start_editing else RetryState.COMPILING
        attempts = 0
        output: bytes | None = None

        while state not in (RetryState.SUCCEEDED, RetryState.ABORTED):
            if state is RetryState.EDITING:
                self.edit(snippet_path)
                state = RetryState.COMPILING
                continue

            attempts += 1
            result = self.runner.run(snippet_path, config)
            if result.success:
                output = result.output
                state = RetryState.SUCCEEDED
            elif self.confirm(RETRY_PROMPT, True):
                _LOGGER.debug("Attempt %d failed (%s), returning to editor", attempts, result.failure)
                state = RetryState.EDITING
            else:
                _LOGGER.debug("Attempt %d failed (%s), retry declined", attempts, result.failure)
                state = RetryState.ABORTED

        return RetryOutcome(state=state, output=output, attempts=attempts)


__all__ = ["RETRY_PROMPT", "RetryLoop", "RetryOutcome", "RetryState", "ask_yes_no"]
