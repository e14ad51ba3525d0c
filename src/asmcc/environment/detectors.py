"""Detect the external programs the compilation pipeline relies on."""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import sys
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from ..config import AppConfig
from ..editor import resolve_editor


@dataclass(slots=True)
class ToolCheck:
    name: str
    command: str | None
    available: bool
    version: str | None = None
    path: Path | None = None
    details: str | None = None


@dataclass(slots=True)
class EnvironmentReport:
    python_version: str
    platform: str
    editor: str
    tools: list[ToolCheck] = field(default_factory=list)
    issues: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def missing_tools(self) -> list[str]:
        return [t.name for t in self.tools if not t.available]

    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-ready form of the report."""
        data = asdict(self)
        for tool in data["tools"]:
            tool["path"] = str(tool["path"]) if tool["path"] else None
        return data


def _check_command(name: str, command: str, *, probe_version: bool = True) -> ToolCheck:
    path = shutil.which(command)
    if not path:
        return ToolCheck(name=name, command=command, available=False)
    version = _probe_version(path) if probe_version else None
    return ToolCheck(name=name, command=command, available=True, version=version, path=Path(path))


def _probe_version(command: str) -> str | None:
    try:
        output = subprocess.check_output([command, "--version"], stderr=subprocess.STDOUT, timeout=4)
    except (OSError, subprocess.CalledProcessError, subprocess.TimeoutExpired):
        return None
    lines = output.decode(errors="replace").splitlines()
    return lines[0].strip() if lines else None


def detect_environment(config: AppConfig) -> EnvironmentReport:
    tools = config.tools
    editor = resolve_editor(default=tools.default_editor)
    report = EnvironmentReport(
        python_version=sys.version.split()[0],
        platform=sys.platform,
        editor=editor,
    )

    report.tools.append(_check_command("compiler", tools.compiler))
    report.tools.append(_check_command("encoder", tools.encoder[0]))
    report.tools.append(_check_command("demangler", tools.demangler[0]))

    editor_argv = shlex.split(editor)
    if editor_argv:
        report.tools.append(_check_command("editor", editor_argv[0], probe_version=False))

    # Demangling and encoding are only needed for some runs.
    optional_tools = {"encoder", "demangler"}
    for tool in report.tools:
        if not tool.available:
            if tool.name in optional_tools:
                report.notes.append(f"Optional tool missing: {tool.name} ({tool.command})")
            else:
                report.issues.append(f"Missing dependency: {tool.name} ({tool.command})")

    if not (os.getenv("VISUAL") or os.getenv("EDITOR")):
        report.notes.append(f"Neither VISUAL nor EDITOR is set; falling back to {tools.default_editor}.")

    return report


__all__ = ["EnvironmentReport", "ToolCheck", "detect_environment"]
