"""CLI package for fetching and storing CO₂ readings."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# The Typer application lives in ``cli.app``. It is not re-exported here so
# that ``cli.app`` keeps resolving to the module; tests patch factories such
# as ``cli.app.build_service`` on that module path.

__all__ = []
