"""Compilation options for a single asmcc run.

``CompilerConfig`` is the single source of truth for one compilation. It is
resolved while it is constructed (language defaults applied, mutually
exclusive options reconciled) and frozen afterwards, so the flag compiler,
the pipeline and the output formatter can all share one instance read-only.
"""

from __future__ import annotations

import os
import re
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Language(str, Enum):
    """Source languages understood by the compiler driver (``-x`` values)."""

    C = "c"
    CPP = "c++"
    OBJECTIVE_C = "objective-c"
    OBJECTIVE_CPP = "objective-c++"


class OptimizationLevel(str, Enum):
    """Values accepted after ``-O``."""

    O0 = "0"
    O1 = "1"
    O2 = "2"
    O3 = "3"
    O4 = "4"
    OS = "s"


CXX_LANGUAGES = frozenset({Language.CPP, Language.OBJECTIVE_CPP})
OBJC_LANGUAGES = frozenset({Language.OBJECTIVE_C, Language.OBJECTIVE_CPP})

DEFAULT_CXX_STANDARD = "c++1y"
DEFAULT_C_STANDARD = "c11"
DEFAULT_WARNINGS = ("all", "effc++")
SYSTEM_INCLUDE_DIR = "/usr/local/include"

_FILE_EXTENSIONS = {
    Language.C: ".c",
    Language.CPP: ".cpp",
    Language.OBJECTIVE_C: ".m",
    Language.OBJECTIVE_CPP: ".mm",
}


def default_include_directories(cwd: str | None = None) -> tuple[str, ...]:
    """Return the include path every run starts with."""
    cwd = cwd or os.getcwd()
    return (cwd, os.path.join(cwd, "include"), SYSTEM_INCLUDE_DIR)


_WARNING_PREFIX = re.compile(r"^(?:-?W)?")


def _dedupe_warnings(values: tuple[str, ...]) -> tuple[str, ...]:
    """Drop repeats of the same warning, however it was spelled."""
    seen: dict[str, str] = {}
    for value in values:
        seen.setdefault(_WARNING_PREFIX.sub("", value.strip(), count=1), value)
    return tuple(seen.values())


class CompilerConfig(BaseModel):
    """Every option that influences one compilation.

    Instances are immutable; use ``with_updates`` to derive a variant that
    goes through the same resolution.
    """

    model_config = ConfigDict(frozen=True)

    language: Language = Language.CPP
    standard: str = DEFAULT_CXX_STANDARD
    optimization_level: OptimizationLevel = OptimizationLevel.O3
    architecture: str = "native"
    forced_word_size: Literal[32, 64] | None = None
    exceptions_enabled: bool = False
    rtti_enabled: bool = False
    fast_math: bool = False
    emit_ir: bool = False
    verbose_assembly: bool = True
    show_encoding: bool = False
    debug_info: bool = False
    demangle: bool = True
    combined_output: bool = False
    defines: tuple[str, ...] = ()
    undefs: tuple[str, ...] = ()
    warnings: tuple[str, ...] = DEFAULT_WARNINGS
    include_directories: tuple[str, ...] = Field(default_factory=default_include_directories)
    extra_flags: tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def resolve(cls, data: Any) -> Any:
        """Apply language-dependent defaults and reconcile exclusive options."""
        if not isinstance(data, dict):
            return data
        data = dict(data)

        language = Language(data.get("language") or Language.CPP)
        is_cxx = language in CXX_LANGUAGES

        standard = (data.get("standard") or "").strip()
        if not standard:
            standard = DEFAULT_CXX_STANDARD if is_cxx else DEFAULT_C_STANDARD
        elif not is_cxx and "++" in standard:
            standard = "gnu11" if "gnu" in standard else DEFAULT_C_STANDARD
        data["language"] = language
        data["standard"] = standard

        if data.get("emit_ir"):
            data["show_encoding"] = False
        return data

    @field_validator("warnings")
    @classmethod
    def _unique_warnings(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return _dedupe_warnings(v)

    def with_updates(self, **changes: Any) -> CompilerConfig:
        """Return a re-resolved copy with ``changes`` applied.

        Switching language without naming a standard picks that language's
        default standard again.
        """
        data = {**self.model_dump(), **changes}
        if "language" in changes and "standard" not in changes:
            data["standard"] = None
        return CompilerConfig.model_validate(data)

    @property
    def is_cxx(self) -> bool:
        return self.language in CXX_LANGUAGES

    @property
    def is_objc(self) -> bool:
        return self.language in OBJC_LANGUAGES

    @property
    def should_demangle(self) -> bool:
        return self.demangle and self.is_cxx

    @property
    def file_extension(self) -> str:
        return _FILE_EXTENSIONS[self.language]


__all__ = [
    "CXX_LANGUAGES",
    "CompilerConfig",
    "DEFAULT_WARNINGS",
    "Language",
    "OBJC_LANGUAGES",
    "OptimizationLevel",
    "default_include_directories",
]
