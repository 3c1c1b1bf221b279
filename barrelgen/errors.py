"""Error taxonomy for barrel generation.

These are exception types so they carry a message and an underlying cause,
but the generation session returns them inside ``Err`` instead of raising.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for every failure reported by a generation session."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message


class NotADirectory(GenerationError):
    """The invocation target does not exist or is not a directory."""


class Uninitialized(GenerationError):
    """A session accessor was used before ``start``."""


class FileSystemError(GenerationError):
    """Reading a directory or writing a barrel file failed."""

    @classmethod
    def from_os_error(cls, action: str, path: str, exc: OSError | UnicodeError) -> FileSystemError:
        reason = getattr(exc, "strerror", None) or str(exc)
        return cls(f"Cannot {action} {path}: {reason}", cause=exc)


class PackagePrefixResolutionError(GenerationError):
    """A package prefix was requested for a path without a library root."""


class ConfigError(ValueError):
    """Invalid configuration input (config file or command-line values)."""


__all__ = [
    "GenerationError",
    "NotADirectory",
    "Uninitialized",
    "FileSystemError",
    "PackagePrefixResolutionError",
    "ConfigError",
]
