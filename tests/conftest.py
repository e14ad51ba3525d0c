"""Shared pytest fixtures for asmcc tests."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable

import pytest

from asmcc.compilation import FlagCompiler, PipelineResult
from asmcc.config import ToolSettings
from asmcc.options import CompilerConfig, Language


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def cxx_config() -> CompilerConfig:
    """Return a C++ configuration with a fixed include path."""
    return CompilerConfig(include_directories=["/src", "/src/include", "/usr/local/include"])


@pytest.fixture
def c_config() -> CompilerConfig:
    """Return a plain C configuration with a fixed include path."""
    return CompilerConfig(language=Language.C, include_directories=["/src"])


@pytest.fixture
def tools() -> ToolSettings:
    return ToolSettings()


@pytest.fixture
def flag_compiler() -> FlagCompiler:
    """Flag compiler pinned to Linux so stdlib flags are stable."""
    return FlagCompiler(platform_name="Linux")


@pytest.fixture
def snippet_path(tmp_path: Path) -> Path:
    path = tmp_path / "snippet.cpp"
    path.write_text("int x;\n")
    return path


# ============================================================================
# Process Fixtures
# ============================================================================

def completed(returncode: int = 0, stdout: bytes = b"") -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout)


@pytest.fixture
def make_completed() -> Callable[..., subprocess.CompletedProcess]:
    """Factory for fake ``subprocess.run`` return values."""
    return completed


class ScriptedRunner:
    """Pipeline runner returning pre-baked results in order."""

    def __init__(self, results: list[PipelineResult]):
        self._results = list(results)
        self.calls: list[tuple[Path, CompilerConfig]] = []

    def run(self, source_path: Path, config: CompilerConfig) -> PipelineResult:
        self.calls.append((source_path, config))
        return self._results.pop(0)


@pytest.fixture
def scripted_runner() -> Callable[[list[PipelineResult]], ScriptedRunner]:
    return ScriptedRunner
