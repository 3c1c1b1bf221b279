"""Path normalization and timestamp helpers.

Barrel generation works on POSIX-style strings so pattern matching and
relative export paths behave the same on every platform; the filesystem is
only touched through the OS-specific form.
"""

from __future__ import annotations

import os
from datetime import datetime, timezone


def to_posix_path(path: str | os.PathLike[str]) -> str:
    """Return ``path`` with the platform separator replaced by ``/``."""
    text = os.fspath(path)
    if os.sep == "/":
        return text
    return text.replace(os.sep, "/")


def to_os_specific_path(path: str) -> str:
    """Inverse of ``to_posix_path``."""
    if os.sep == "/":
        return path
    return path.replace("/", os.sep)


def last_segment(path: str) -> str:
    """Return the final segment of a POSIX path, ignoring a trailing slash."""
    stripped = path.rstrip("/")
    if not stripped:
        return ""
    return stripped.rsplit("/", 1)[-1]


def format_date(value: datetime | None = None) -> str:
    """Format ``value`` (default: now) as ``YYYY-MM-DD HH:MM:SS`` in UTC."""
    if value is None:
        value = datetime.now(timezone.utc)
    elif value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%d %H:%M:%S")


__all__ = [
    "to_posix_path",
    "to_os_specific_path",
    "last_segment",
    "format_date",
]
