"""Translate a ``CompilerConfig`` into compiler command-line arguments.

The order of the emitted flags is significant: later flags may override
earlier ones, and user pass-through flags always come last so they can
override anything asmcc chose.
"""

from __future__ import annotations

import platform
import re
from dataclasses import dataclass, field
from enum import Enum

from ..options import CompilerConfig

_WARNING_PREFIX = re.compile(r"^(?:-?W)?")
_INCLUDE_PREFIX = re.compile(r"^(?:-I)?")
_SUMMARY_NOISE = re.compile(r"^-[WI]")


class FlagKind(str, Enum):
    LANGUAGE = "language"
    TARGET = "target"
    OUTPUT = "output"
    STANDARD = "standard"
    OPTIMIZATION = "optimization"
    EXCEPTIONS = "exceptions"
    RTTI = "rtti"
    FLOATING_POINT = "floating-point"
    WARNING = "warning"
    INCLUDE = "include"
    DEFINE = "define"
    UNDEF = "undef"
    DEBUG = "debug"
    EXTRA = "extra"


@dataclass(frozen=True, slots=True)
class Flag:
    kind: FlagKind
    value: str


@dataclass(slots=True)
class FlagBuilder:
    """Collects flags in order and drops blank tokens once, at the end."""

    flags: list[Flag] = field(default_factory=list)

    def add(self, kind: FlagKind, *values: str) -> FlagBuilder:
        for value in values:
            self.flags.append(Flag(kind, value))
        return self

    def build(self) -> list[Flag]:
        return [flag for flag in self.flags if flag.value.strip()]


def to_warning(name: str) -> str:
    """Normalize ``all``, ``Wall`` or ``-Wall`` to ``-Wall``."""
    name = name.strip()
    return _WARNING_PREFIX.sub("-W", name, count=1) if name else ""


def to_include(path: str) -> str:
    """Normalize ``dir`` or ``-Idir`` to ``-Idir``."""
    path = path.strip()
    return _INCLUDE_PREFIX.sub("-I", path, count=1) if path else ""


def is_darwin(platform_name: str | None = None) -> bool:
    return (platform_name or platform.system()) == "Darwin"


class FlagCompiler:
    """Pure mapping from a resolved ``CompilerConfig`` to compiler flags.

    Args:
        platform_name: Overrides ``platform.system()`` when choosing the
            C++ standard library; mainly useful in tests.
    """

    def __init__(self, platform_name: str | None = None) -> None:
        self.platform_name = platform_name

    def flags(self, config: CompilerConfig) -> list[Flag]:
        """Return the typed flag records for ``config`` in invocation order."""
        builder = FlagBuilder()

        builder.add(FlagKind.LANGUAGE, f"-x{config.language.value}")

        builder.add(FlagKind.TARGET, f"-march={config.architecture}")
        if config.forced_word_size is not None:
            builder.add(FlagKind.TARGET, f"-m{config.forced_word_size}")

        builder.add(FlagKind.OUTPUT, "-S")
        if config.emit_ir:
            builder.add(FlagKind.OUTPUT, "-emit-llvm")
        if config.verbose_assembly:
            builder.add(FlagKind.OUTPUT, "-Xclang", "-masm-verbose")

        builder.add(FlagKind.STANDARD, f"-std={config.standard}", self._stdlib_flag(config))
        builder.add(FlagKind.OPTIMIZATION, f"-O{config.optimization_level.value}")
        builder.add(FlagKind.EXCEPTIONS, *self._exception_flags(config))
        builder.add(FlagKind.RTTI, self._rtti_flag(config))

        if config.fast_math:
            builder.add(FlagKind.FLOATING_POINT, "-ffast-math")

        builder.add(FlagKind.WARNING, *(to_warning(w) for w in config.warnings))
        builder.add(FlagKind.INCLUDE, *(to_include(i) for i in config.include_directories))

        builder.add(FlagKind.DEFINE, *(f"-D{d.strip()}" for d in config.defines if d.strip()))
        builder.add(FlagKind.UNDEF, *(f"-U{u.strip()}" for u in config.undefs if u.strip()))

        if config.debug_info:
            builder.add(FlagKind.DEBUG, "-g")
        builder.add(FlagKind.EXTRA, *config.extra_flags)

        return builder.build()

    def compile(self, config: CompilerConfig) -> list[str]:
        """Full argument sequence used to invoke the compiler."""
        return [flag.value for flag in self.flags(config)]

    def summary(self, config: CompilerConfig) -> list[str]:
        """Display-only variant without ``-W*`` and ``-I*`` noise."""
        return [arg for arg in self.compile(config) if not _SUMMARY_NOISE.match(arg)]

    def _stdlib_flag(self, config: CompilerConfig) -> str:
        if not config.is_cxx:
            return ""
        return "-stdlib=libc++" if is_darwin(self.platform_name) else "-stdlib=libstdc++"

    @staticmethod
    def _exception_flags(config: CompilerConfig) -> tuple[str, ...]:
        if not config.is_cxx:
            return ()
        if config.exceptions_enabled:
            return ("-fexceptions", "-fobjc-exceptions" if config.is_objc else "")
        return ("-fno-exceptions", "-fno-objc-exceptions" if config.is_objc else "")

    @staticmethod
    def _rtti_flag(config: CompilerConfig) -> str:
        if not config.is_cxx:
            return ""
        return "-frtti" if config.rtti_enabled else "-fno-rtti"


__all__ = ["Flag", "FlagBuilder", "FlagCompiler", "FlagKind", "is_darwin", "to_include", "to_warning"]
