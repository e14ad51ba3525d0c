"""Compilation module: flag assembly and the external process pipeline."""

from .flags import FlagCompiler, to_include, to_warning
from .pipeline import (
    Pipeline,
    PipelineResult,
    PipelineRunner,
    PipelineStage,
    build_pipeline,
    execute,
)

__all__ = [
    "FlagCompiler",
    "Pipeline",
    "PipelineResult",
    "PipelineRunner",
    "PipelineStage",
    "build_pipeline",
    "execute",
    "to_include",
    "to_warning",
]
