"""Rendering of compiler output for display or for an output file."""

from __future__ import annotations

import re

from .compilation.flags import FlagCompiler
from .compilation.pipeline import build_pipeline
from .config import ToolSettings
from .options import CompilerConfig

TAB_WIDTH = 8
GENERATED_CODE_SEPARATOR = "/******* Generated code *********/"
BLOCK_COMMENT_OPEN = "/*"
BLOCK_COMMENT_CLOSE = "*/"
IR_LINE_COMMENT = ";"
ASM_LINE_COMMENT = "#"

_TAB_RUN = re.compile(r"([^\t\n]*)\t")


def _pad_tab(match: re.Match[str]) -> str:
    run = match.group(1)
    return run + " " * (TAB_WIDTH - len(run) % TAB_WIDTH)


def expand_tabs(text: str) -> str:
    """Replace each tab with spaces up to the next multiple-of-8 column.

    Columns restart on every line. A tab that already sits on a tab stop
    still advances a full eight columns.
    """
    return "\n".join(_TAB_RUN.sub(_pad_tab, line) for line in text.split("\n"))


def _ensure_newline(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


class OutputFormatter:
    """Build the final text shown to the user.

    The header always uses the summary flags so it stays readable; it is a
    description of the invocation, not a command that can be re-run as-is.
    """

    def __init__(self, flag_compiler: FlagCompiler | None = None, tools: ToolSettings | None = None) -> None:
        self.flag_compiler = flag_compiler or FlagCompiler()
        self.tools = tools or ToolSettings()

    def header(self, config: CompilerConfig, marker: str) -> str:
        pipeline = build_pipeline(config, None, self.tools, self.flag_compiler, summary=True)
        return f"{marker} Compiled with `{pipeline.describe()}`\n"

    def comment_marker(self, config: CompilerConfig) -> str:
        if config.combined_output:
            return BLOCK_COMMENT_OPEN
        return IR_LINE_COMMENT if config.emit_ir else ASM_LINE_COMMENT

    def format(self, source_text: str, captured: bytes | str, config: CompilerConfig) -> str:
        if isinstance(captured, bytes):
            captured = captured.decode("utf-8", errors="replace")
        body = _ensure_newline(expand_tabs(captured)) if captured else ""
        header = self.header(config, self.comment_marker(config))

        if not config.combined_output:
            return header + body

        parts = [
            _ensure_newline(source_text),
            "\n",
            GENERATED_CODE_SEPARATOR + "\n",
            header,
            body,
            "\n",
            BLOCK_COMMENT_CLOSE + "\n",
        ]
        return "".join(parts)


__all__ = ["OutputFormatter", "expand_tabs"]
