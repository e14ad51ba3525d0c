"""Starting snippets for the working source file."""

from __future__ import annotations

import logging
from pathlib import Path

from .errors import ConfigResolutionError
from .options import CompilerConfig

_LOGGER = logging.getLogger(__name__)

CXX_TEMPLATE = """\
#include <cinttypes>
#include <cmath>
#include <cstddef>
#include <cstring>
#include <climits>

uint64_t factorial(uint64_t arg) {
  if (arg <= 1) return 1;
  return arg * factorial(arg - 1);
}
"""

C_TEMPLATE = """\
#include <inttypes.h>
#include <math.h>
#include <stddef.h>
#include <string.h>
#include <limits.h>
#include <stdbool.h>

uint64_t factorial(uint64_t arg) {
  if (arg <= 1) return 1;
  return arg * factorial(arg - 1);
}
"""


def default_template(config: CompilerConfig) -> str:
    return CXX_TEMPLATE if config.is_cxx else C_TEMPLATE


def read_template(path: Path) -> str:
    """Read a custom template, raising ``ConfigResolutionError`` if unreadable."""
    try:
        return path.read_text()
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigResolutionError(f"Unable to read template file: {path}") from exc


def select_template(config: CompilerConfig, template_path: Path | None = None) -> str:
    """Return the custom template if usable, otherwise the language default."""
    if template_path is not None:
        try:
            return read_template(template_path)
        except ConfigResolutionError as exc:
            _LOGGER.warning("%s, ignoring custom template", exc)
    return default_template(config)


__all__ = ["CXX_TEMPLATE", "C_TEMPLATE", "default_template", "read_template", "select_template"]
