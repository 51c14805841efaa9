"""Public package surface for dirbrowser.

Exports ``main`` for programmatic CLI invocation and the controller for
hosts that drive the file table themselves.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def __getattr__(name: str):
    if name == "DirectoryController":
        from .controller import DirectoryController

        return DirectoryController
    raise AttributeError(name)


__all__ = ["main", "DirectoryController"]
