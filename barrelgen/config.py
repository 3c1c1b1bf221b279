"""Generation options and JSON config loading.

``GenerationConfig`` is the immutable option set a session runs with.
Config files use the camelCase keys of the editor settings
(``appendFolderName``, ``excludeDirList``, ...). Explicit ``--config`` files
are validated strictly; the per-user defaults file is read defensively and
invalid entries are dropped.
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from .errors import ConfigError

APP_NAME = "barrelgen"
CONFIG_FILENAME = "config.json"
DEFAULT_CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
CONFIG_PATH = DEFAULT_CONFIG_PATH

BOOL = "a boolean"
STRING = "a string"
STRING_LIST = "an array of strings"

# config-file key -> (GenerationConfig field, expected kind)
CONFIG_KEYS: dict[str, tuple[str, str]] = {
    "appendFolderName": ("append_folder_name", BOOL),
    "defaultBarrelName": ("default_barrel_name", STRING),
    "excludeDirList": ("exclude_dir_list", STRING_LIST),
    "excludeFileList": ("exclude_file_list", STRING_LIST),
    "excludeFreezed": ("exclude_freezed", BOOL),
    "excludeGenerated": ("exclude_generated", BOOL),
    "prependFolderName": ("prepend_folder_name", BOOL),
    "prependPackageToLibExport": ("prepend_package_to_lib_export", BOOL),
    "skipEmpty": ("skip_empty", BOOL),
}


@dataclass(frozen=True)
class GenerationConfig:
    """Options for one generation run. All flags combine independently."""

    append_folder_name: bool = False
    prepend_folder_name: bool = False
    default_barrel_name: str = ""
    exclude_dir_list: tuple[str, ...] = field(default_factory=tuple)
    exclude_file_list: tuple[str, ...] = field(default_factory=tuple)
    exclude_freezed: bool = False
    exclude_generated: bool = False
    prepend_package_to_lib_export: bool = False
    skip_empty: bool = False

    def replace(self, **changes: object) -> GenerationConfig:
        for key in ("exclude_dir_list", "exclude_file_list"):
            if key in changes:
                changes[key] = tuple(changes[key])  # type: ignore[arg-type]
        return dataclasses.replace(self, **changes)

    def to_mapping(self) -> dict[str, object]:
        """Serialize back to config-file keys."""
        data: dict[str, object] = {}
        for key, (attr, kind) in CONFIG_KEYS.items():
            value = getattr(self, attr)
            data[key] = list(value) if kind == STRING_LIST else value
        return data


def _is_valid(kind: str, value: object) -> bool:
    if kind == BOOL:
        return isinstance(value, bool)
    if kind == STRING:
        return isinstance(value, str)
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def validate_config_mapping(data: Mapping[str, object]) -> dict[str, object]:
    """Return the known keys of ``data`` after strict type validation.

    Raises ``ConfigError`` naming the first key with a wrong value type.
    Unknown keys are ignored.
    """
    validated: dict[str, object] = {}
    for key, (_attr, kind) in CONFIG_KEYS.items():
        if key not in data:
            continue
        value = data[key]
        if not _is_valid(kind, value):
            raise ConfigError(f"`{key}` must be {kind}")
        validated[key] = list(value) if kind == STRING_LIST else value  # type: ignore[arg-type]
    return validated


def config_from_mapping(data: Mapping[str, object]) -> GenerationConfig:
    """Build a ``GenerationConfig`` from config-file keys; missing keys default."""
    validated = validate_config_mapping(data)
    changes = {CONFIG_KEYS[key][0]: value for key, value in validated.items()}
    return GenerationConfig().replace(**changes)


def load_config_file(path: Path) -> dict[str, object]:
    """Load and validate an explicit JSON config file.

    Unlike the user defaults, any problem here is an error the caller must
    report: missing file, malformed JSON, non-object payload, bad values.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Failed to load configuration file: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Failed to load configuration file: {path} must contain a JSON object")
    return validate_config_mapping(data)


def load_config() -> dict[str, object]:
    """Load the raw per-user JSON object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def load_user_config() -> dict[str, object]:
    """Return the valid generation options stored in the per-user config."""
    data = load_config()
    options: dict[str, object] = {}
    for key, (_attr, kind) in CONFIG_KEYS.items():
        value = data.get(key)
        if key in data and _is_valid(kind, value):
            options[key] = list(value) if kind == STRING_LIST else value  # type: ignore[arg-type]
    return options


def save_config(data: dict[str, object]) -> None:
    """Persist the per-user config as pretty-printed JSON.

    Raises ``ConfigError`` when the file cannot be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to save configuration file {CONFIG_PATH}: {exc}") from exc


def save_user_config(config: GenerationConfig) -> None:
    """Store ``config`` as the per-user defaults, keeping unrelated keys."""
    data = load_config()
    data.update(config.to_mapping())
    save_config(data)


__all__ = [
    "APP_NAME",
    "CONFIG_PATH",
    "CONFIG_KEYS",
    "DEFAULT_CONFIG_PATH",
    "GenerationConfig",
    "config_from_mapping",
    "load_config",
    "load_config_file",
    "load_user_config",
    "save_config",
    "save_user_config",
    "validate_config_mapping",
]
