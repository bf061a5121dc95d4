"""Command-line entry points for the Awair exporter: ``serve`` and ``check``."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# ``cli.app`` must stay the module (tests patch ``uvicorn`` and the fetcher on
# it), so the Typer object is reached as ``cli.app.app``.

__all__ = []
