"""Sequential execution of the compiler and its post-processing stages.

A pipeline is an ordered list of ``PipelineStage`` descriptors: the primary
compiler invocation, then optionally an encoding pass and a demangling pass.
Each stage runs to completion before the next one starts, and the complete
stdout of one stage becomes the complete stdin of the next.

stderr of every stage is inherited from asmcc so compiler diagnostics reach
the terminal directly; only exit statuses are inspected.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

from ..config import ToolSettings
from ..errors import (
    DemangleStageFailure,
    EncodingStageFailure,
    PipelineFailure,
    PrimaryCompileFailure,
)
from ..options import CompilerConfig
from .flags import FlagCompiler

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PipelineStage:
    """One external process invocation."""

    name: str
    argv: tuple[str, ...]
    reads_stdin: bool
    failure: type[PipelineFailure] = PipelineFailure

    @property
    def program(self) -> str:
        return self.argv[0]

    def describe(self) -> str:
        return shlex.join(self.argv)


@dataclass(frozen=True, slots=True)
class Pipeline:
    stages: tuple[PipelineStage, ...]

    def __iter__(self):
        return iter(self.stages)

    def __len__(self) -> int:
        return len(self.stages)

    @property
    def names(self) -> list[str]:
        return [stage.name for stage in self.stages]

    def describe(self) -> str:
        """Shell-style rendering, e.g. ``clang ... | c++filt``."""
        return " | ".join(stage.describe() for stage in self.stages)


@dataclass(slots=True)
class PipelineResult:
    """Outcome of one pipeline run.

    ``output`` is only populated on success; a failed run never exposes the
    output of the stages that did succeed.
    """

    success: bool
    output: bytes = b""
    failure: PipelineFailure | None = None
    stages_run: list[str] = field(default_factory=list)

    def raise_for_failure(self) -> bytes:
        if self.failure is not None:
            raise self.failure
        return self.output


def build_pipeline(
    config: CompilerConfig,
    source_path: Path | str | None,
    tools: ToolSettings | None = None,
    flag_compiler: FlagCompiler | None = None,
    *,
    summary: bool = False,
) -> Pipeline:
    """Build the stage list for ``config``.

    With ``summary=True`` the compile stage carries the display-only flag
    subset and no source/output arguments; such a pipeline is meant for
    headers and must not be executed.
    """
    tools = tools or ToolSettings()
    flag_compiler = flag_compiler or FlagCompiler()

    if summary:
        compile_argv = [tools.compiler, *flag_compiler.summary(config)]
    else:
        compile_argv = [tools.compiler, *flag_compiler.compile(config), str(source_path), "-o", "-"]

    stages = [PipelineStage("compile", tuple(compile_argv), reads_stdin=False, failure=PrimaryCompileFailure)]
    if config.show_encoding:
        stages.append(PipelineStage("encode", tuple(tools.encoder), reads_stdin=True, failure=EncodingStageFailure))
    if config.should_demangle:
        stages.append(PipelineStage("demangle", tuple(tools.demangler), reads_stdin=True, failure=DemangleStageFailure))
    return Pipeline(tuple(stages))


def execute(pipeline: Pipeline) -> PipelineResult:
    """Run ``pipeline`` stage by stage, stopping at the first failure."""
    data = b""
    stages_run: list[str] = []

    for stage in pipeline:
        _LOGGER.debug("Running %s stage: %s", stage.name, stage.describe())
        stages_run.append(stage.name)
        try:
            completed = subprocess.run(
                list(stage.argv),
                input=data if stage.reads_stdin else None,
                stdout=subprocess.PIPE,
                check=False,
            )
        except OSError as exc:
            _LOGGER.error("Unable to start %s (%s): %s", stage.program, stage.name, exc)
            return PipelineResult(success=False, failure=stage.failure(stage.name), stages_run=stages_run)

        if completed.returncode != 0:
            _LOGGER.info("%s stage exited with status %d", stage.name, completed.returncode)
            return PipelineResult(
                success=False,
                failure=stage.failure(stage.name, completed.returncode),
                stages_run=stages_run,
            )
        data = completed.stdout or b""

    return PipelineResult(success=True, output=data, stages_run=stages_run)


class PipelineRunner:
    """Compile a source file and chain the output through optional stages."""

    def __init__(self, tools: ToolSettings | None = None, flag_compiler: FlagCompiler | None = None) -> None:
        self.tools = tools or ToolSettings()
        self.flag_compiler = flag_compiler or FlagCompiler()

    def pipeline(self, source_path: Path | str, config: CompilerConfig) -> Pipeline:
        return build_pipeline(config, source_path, self.tools, self.flag_compiler)

    def run(self, source_path: Path | str, config: CompilerConfig) -> PipelineResult:
        return execute(self.pipeline(source_path, config))


__all__ = [
    "Pipeline",
    "PipelineResult",
    "PipelineRunner",
    "PipelineStage",
    "build_pipeline",
    "execute",
]
