"""Shared application state helpers for the CLI and scripts."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .compilation import FlagCompiler, PipelineRunner
from .config import AppConfig, load_config
from .formatting import OutputFormatter
from .logging import configure_logging


@dataclass(slots=True)
class AppState:
    config: AppConfig
    flag_compiler: FlagCompiler
    runner: PipelineRunner
    formatter: OutputFormatter


def build_state(config_path: Optional[Path]) -> AppState:
    """Construct an application state bundle.

    Loads configuration, configures logging and wires the flag compiler,
    runner and formatter so they all share the same tool settings.
    """

    config = load_config(config_path)
    configure_logging(config.verbosity)  # type: ignore[arg-type]

    flag_compiler = FlagCompiler()
    runner = PipelineRunner(config.tools, flag_compiler)
    formatter = OutputFormatter(flag_compiler, config.tools)
    return AppState(config=config, flag_compiler=flag_compiler, runner=runner, formatter=formatter)
