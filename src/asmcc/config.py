"""Configuration loading and modelling."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "default_config.toml"
USER_CONFIG_PATH = Path("~/.config/asmcc/config.toml").expanduser()


class ToolSettings(BaseModel):
    compiler: str = "clang"
    encoder: list[str] = Field(default_factory=lambda: ["clang", "-cc1as", "-show-encoding"])
    demangler: list[str] = Field(default_factory=lambda: ["c++filt"])
    default_editor: str = "/usr/bin/nano"


class OutputSettings(BaseModel):
    verbosity: str = "normal"


class AppConfig(BaseModel):
    tools: ToolSettings = Field(default_factory=ToolSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    raw: dict[str, Any] = Field(default_factory=dict)

    @property
    def verbosity(self) -> str:
        return self.output.verbosity


def _load_toml(path: Path) -> dict[str, Any]:
    import tomllib

    with path.open("rb") as fh:
        return tomllib.load(fh)


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration from defaults and optional user overrides."""

    load_dotenv()

    data: dict[str, Any] = {}
    if DEFAULT_CONFIG_PATH.exists():
        data = _merge(data, _load_toml(DEFAULT_CONFIG_PATH))

    resolved_path = config_path
    if resolved_path is None and USER_CONFIG_PATH.exists():
        resolved_path = USER_CONFIG_PATH

    if resolved_path and resolved_path.exists():
        data = _merge(data, _load_toml(resolved_path))

    config = AppConfig(raw=data)

    # Re-bind nested models from merged dict to capture overrides.
    if "tools" in data:
        config.tools = ToolSettings.model_validate(data["tools"])
    if "output" in data:
        config.output = OutputSettings.model_validate(data["output"])

    # A compiler override in the environment wins over any config file so
    # that e.g. `ASMCC_COMPILER=clang-18 asmcc compile` works ad hoc.
    env_compiler = os.getenv("ASMCC_COMPILER")
    if env_compiler:
        config.tools.compiler = env_compiler

    return config
