"""Public package surface for barrelgen.

Exports ``create_session`` for editor integrations and ``main`` for
programmatic CLI invocation.
"""

from __future__ import annotations

from .config import GenerationConfig
from .context import (
    GENERATION_TYPES,
    RECURSIVE,
    REGULAR,
    REGULAR_SUBFOLDERS,
    GenerationSession,
    SessionOptions,
    create_session,
)
from .errors import (
    ConfigError,
    FileSystemError,
    GenerationError,
    NotADirectory,
    PackagePrefixResolutionError,
    Uninitialized,
)
from .logger import GenerationLogger, LoggingLogger
from .paths import to_os_specific_path, to_posix_path
from .result import Empty, Err, Ok, WrittenAt

__version__ = "0.1.0"


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "__version__",
    "main",
    "create_session",
    "GenerationSession",
    "SessionOptions",
    "GenerationConfig",
    "GenerationLogger",
    "LoggingLogger",
    "REGULAR",
    "RECURSIVE",
    "REGULAR_SUBFOLDERS",
    "GENERATION_TYPES",
    "Ok",
    "Err",
    "WrittenAt",
    "Empty",
    "GenerationError",
    "NotADirectory",
    "Uninitialized",
    "FileSystemError",
    "PackagePrefixResolutionError",
    "ConfigError",
    "to_posix_path",
    "to_os_specific_path",
]
