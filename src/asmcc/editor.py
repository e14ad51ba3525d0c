"""Editor invocation and the temporary working snippet."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
from pathlib import Path
from typing import Mapping

_LOGGER = logging.getLogger(__name__)

DEFAULT_EDITOR = "/usr/bin/nano"


def resolve_editor(environ: Mapping[str, str] | None = None, default: str = DEFAULT_EDITOR) -> str:
    """Pick ``$VISUAL``, then ``$EDITOR``, then ``default``."""
    environ = os.environ if environ is None else environ
    return environ.get("VISUAL") or environ.get("EDITOR") or default


def edit_file(path: Path | str, editor: str | None = None) -> None:
    """Open ``path`` in the editor and block until the editor exits.

    The editor's exit status carries no meaning and is only logged. An
    editor that cannot be started is logged and the file is left as it was.
    """
    command = [*shlex.split(editor or resolve_editor()), str(path)]
    _LOGGER.debug("Launching editor: %s", shlex.join(command))
    try:
        returncode = subprocess.call(command)
    except OSError as exc:
        _LOGGER.error("Unable to start editor %s: %s", command[0], exc)
        return
    if returncode != 0:
        _LOGGER.debug("Editor exited with status %d", returncode)


class WorkingSnippet:
    """Temporary source file edited and compiled during one run.

    Used as a context manager; the file is removed on exit.
    """

    def __init__(self, content: str, suffix: str, prefix: str = "asmcc") -> None:
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix)
        os.close(fd)
        self.path = Path(name)
        self.write(content)

    def write(self, content: str) -> None:
        self.path.write_text(content)

    def read(self) -> str:
        return self.path.read_text()

    def __enter__(self) -> WorkingSnippet:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if self.path.exists():
            self.path.unlink()


__all__ = ["DEFAULT_EDITOR", "WorkingSnippet", "edit_file", "resolve_editor"]
