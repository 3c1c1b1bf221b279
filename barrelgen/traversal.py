"""Directory classification and naming policy for barrel generation.

Everything here is stateless. ``classify`` and ``collect_flattened`` read the
filesystem; every other helper works on POSIX path strings only.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from functools import lru_cache

from pyuca import Collator

from .config import GenerationConfig
from .errors import PackagePrefixResolutionError
from .paths import last_segment, to_os_specific_path
from .patterns import matches_any
from .result import Err, Ok

DART_EXTENSION = ".dart"
FREEZED_SUFFIX = ".freezed.dart"
GENERATED_SUFFIX = ".g.dart"
LIBRARY_ROOT = "lib"

logger = logging.getLogger(__name__)


def is_dart_file(name: str) -> bool:
    return name.endswith(DART_EXTENSION)


def is_freezed_file(name: str) -> bool:
    return name.endswith(FREEZED_SUFFIX)


def is_generated_file(name: str) -> bool:
    return name.endswith(GENERATED_SUFFIX)


def is_barrel_file(barrel_name: str, name: str) -> bool:
    """Return whether ``name`` is the barrel output for ``barrel_name``."""
    return name == f"{barrel_name}{DART_EXTENSION}"


def is_library_root(path: str) -> bool:
    return last_segment(path) == LIBRARY_ROOT


def should_export(name: str, file_path: str, barrel_name: str, config: GenerationConfig) -> bool:
    """Return whether file ``name`` (at POSIX ``file_path``) gets an export line."""
    if is_barrel_file(barrel_name, name):
        return False
    if not is_dart_file(name):
        return False
    if config.exclude_freezed and is_freezed_file(name):
        return False
    if config.exclude_generated and is_generated_file(name):
        return False
    if matches_any(file_path, config.exclude_file_list) or matches_any(name, config.exclude_file_list):
        return False
    return True


def should_export_directory(directory_path: str, config: GenerationConfig) -> bool:
    """Return whether the directory at POSIX ``directory_path`` is walked."""
    return not matches_any(directory_path, config.exclude_dir_list)


def _scan_directory(target_path: str) -> list[tuple[str, bool, bool]]:
    """Return ``(name, is_file, is_dir)`` rows sorted by name.

    Symlinks are neither files nor directories here, so they are never
    exported or followed.
    """
    rows: list[tuple[str, bool, bool]] = []
    with os.scandir(to_os_specific_path(target_path)) as entries:
        for entry in entries:
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = entry.is_file(follow_symlinks=False)
            except OSError as exc:
                logger.debug("Skipping %s/%s: %s", target_path, entry.name, exc)
                continue
            rows.append((entry.name, is_file, is_dir))
    rows.sort(key=lambda row: row[0])
    return rows


def classify(barrel_name: str, target_path: str, config: GenerationConfig) -> tuple[list[str], list[str]]:
    """Split one directory level into exportable files and walkable directories.

    Returns ``(files, directories)`` as bare entry names in enumeration
    order. Export ordering is applied later by ``order_exports``. Raises
    ``OSError`` when the directory cannot be listed.
    """
    files: list[str] = []
    directories: list[str] = []
    for name, is_file, is_dir in _scan_directory(target_path):
        entry_path = f"{target_path}/{name}"
        if is_file:
            if should_export(name, entry_path, barrel_name, config):
                files.append(name)
        elif is_dir:
            if should_export_directory(entry_path, config):
                directories.append(name)
    return files, directories


def collect_flattened(barrel_name: str, target_path: str, config: GenerationConfig) -> list[str]:
    """Collect exportable files of the whole subtree under ``target_path``.

    Nested files are returned as forward-slash paths relative to
    ``target_path``. Excluded directories are skipped without being listed.
    """
    collected: list[str] = []

    def walk(directory: str, prefix: str) -> None:
        files, directories = classify(barrel_name, directory, config)
        collected.extend(f"{prefix}{name}" for name in files)
        for name in directories:
            walk(f"{directory}/{name}", f"{prefix}{name}/")

    walk(target_path, "")
    return collected


def compute_barrel_name(target_path: str, config: GenerationConfig) -> str:
    """Return the barrel file name (without extension) for ``target_path``."""
    folder = last_segment(target_path)
    if config.default_barrel_name:
        base = config.default_barrel_name.replace(" ", "_").lower()
    else:
        base = folder
    if config.prepend_folder_name:
        base = f"{folder}_{base}"
    if config.append_folder_name:
        base = f"{base}_{folder}"
    return base


def resolve_package_prefix(path: str) -> Ok[str] | Err[PackagePrefixResolutionError]:
    """Return ``package:<name>/`` where ``<name>`` is the segment before ``lib``.

    Only whole ``lib`` segments count; the first one wins.
    """
    segments = path.split("/")
    try:
        index = segments.index(LIBRARY_ROOT)
    except ValueError:
        return Err(PackagePrefixResolutionError(f"Cannot resolve package name: {path} has no '{LIBRARY_ROOT}' folder"))
    package = segments[index - 1] if index > 0 else ""
    if not package:
        return Err(PackagePrefixResolutionError(f"Cannot resolve package name: no folder above '{LIBRARY_ROOT}' in {path}"))
    return Ok(f"package:{package}/")


@lru_cache(maxsize=1)
def _collator() -> Collator:
    # Loads the DUCET table on first use.
    return Collator()


def export_sort_key(file: str) -> tuple[tuple[int, ...], str]:
    """Unicode collation key with the raw string as tie-break.

    Lowercase sorts before uppercase and ``_`` before ``.``, so
    ``user_model.dart`` precedes ``user.dart``.
    """
    return (_collator().sort_key(file), file)


def order_exports(files: Iterable[str]) -> list[str]:
    """Sort export entries in Unicode collation order."""
    return sorted(files, key=export_sort_key)


__all__ = [
    "DART_EXTENSION",
    "FREEZED_SUFFIX",
    "GENERATED_SUFFIX",
    "LIBRARY_ROOT",
    "classify",
    "collect_flattened",
    "compute_barrel_name",
    "export_sort_key",
    "is_barrel_file",
    "is_dart_file",
    "is_freezed_file",
    "is_generated_file",
    "is_library_root",
    "order_exports",
    "resolve_package_prefix",
    "should_export",
    "should_export_directory",
]
