"""asmcc - inspect the assembly your compiler generates for a snippet."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["__version__"]

try:  # pragma: no cover - metadata probe
    __version__ = version("asmcc")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.1.0"
