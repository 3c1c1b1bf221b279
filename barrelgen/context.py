"""Generation session: validates a target and writes its barrel files.

A ``GenerationSession`` is created once per user request through
``create_session`` and started once. It holds the only mutable state of the
engine; all classification and naming decisions live in ``traversal``.

Three generation types are supported:

- ``REGULAR``: one barrel for the files of the target directory
- ``REGULAR_SUBFOLDERS``: one barrel for every file of the whole subtree
- ``RECURSIVE``: one barrel per directory, children first; each parent
  exports the barrels of its children

``start`` never raises. It returns ``Ok(path)`` for the written top-level
barrel, ``Ok("")`` when ``skip_empty`` suppressed it, or ``Err(error)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from .config import GenerationConfig
from .errors import FileSystemError, GenerationError, NotADirectory, Uninitialized
from .logger import GenerationLogger, LoggingLogger
from .paths import format_date, to_os_specific_path, to_posix_path
from .result import Empty, Err, GenerationOutcome, Ok, WrittenAt
from .traversal import (
    DART_EXTENSION,
    classify,
    collect_flattened,
    compute_barrel_name,
    is_library_root,
    order_exports,
    resolve_package_prefix,
)

REGULAR = "REGULAR"
RECURSIVE = "RECURSIVE"
REGULAR_SUBFOLDERS = "REGULAR_SUBFOLDERS"
GENERATION_TYPES = (REGULAR, RECURSIVE, REGULAR_SUBFOLDERS)

PHASE_UNINITIALIZED = "uninitialized"
PHASE_VALIDATING = "validating"
PHASE_GENERATING = "generating"
PHASE_DONE = "done"
PHASE_FAILED = "failed"


@dataclass(frozen=True)
class SessionOptions:
    log_timestamps: bool = True


@dataclass(frozen=True)
class UninitializedState:
    """Session state before ``start`` was called."""


@dataclass(frozen=True)
class SessionState:
    """Session state fixed by ``start`` for the whole run.

    ``fs_path`` is the OS-native target path; ``path`` is its POSIX form used
    for pattern matching and string splitting.
    """

    fs_path: str
    path: str
    type: str
    start_timestamp: float


class GenerationSession:
    def __init__(
        self,
        config: GenerationConfig,
        logger: GenerationLogger,
        options: SessionOptions | None = None,
    ) -> None:
        self.config = config
        self.logger = logger
        self.options = options if options is not None else SessionOptions()
        self.state: UninitializedState | SessionState = UninitializedState()
        self.phase = PHASE_UNINITIALIZED

    def _format(self, message: str) -> str:
        if not self.options.log_timestamps:
            return message
        return f"[{format_date()}] {message}"

    def _require_state(self, name: str) -> Ok[SessionState] | Err[Uninitialized]:
        if isinstance(self.state, SessionState):
            return Ok(self.state)
        return Err(Uninitialized(f"Cannot access {name} in context. Did you initialise the context?"))

    @property
    def fs_path(self) -> Ok[str] | Err[Uninitialized]:
        state = self._require_state("fs_path")
        if state.is_err():
            return state
        return Ok(state.value.fs_path)

    @property
    def path(self) -> Ok[str] | Err[Uninitialized]:
        state = self._require_state("path")
        if state.is_err():
            return state
        return Ok(state.value.path)

    def on_error(self, message: str) -> None:
        self.logger.log(self._format("An error occurred:"))
        self.logger.error(message)

    def end_generation(self) -> None:
        self.logger.done(self._format("Generation finished"))

    def start(
        self,
        fs_path: str,
        path: str | None = None,
        generation_type: str = REGULAR,
    ) -> Ok[str] | Err[GenerationError]:
        """Run one generation for ``fs_path`` and return the top-level result."""
        started_at = datetime.now(timezone.utc)
        fs_path = str(fs_path)
        self.state = SessionState(
            fs_path=fs_path,
            path=path if path is not None else to_posix_path(fs_path),
            type=generation_type,
            start_timestamp=started_at.timestamp(),
        )
        self.phase = PHASE_VALIDATING

        self.logger.log(self._format("Generation started"))
        self.logger.log(self._format(f"Type: {str(generation_type).lower()} - Path: {fs_path}"))

        result = self._validate_and_generate(self.state)
        if result.is_err():
            self.phase = PHASE_FAILED
            return result

        self.phase = PHASE_DONE
        outcome = result.value
        if isinstance(outcome, WrittenAt):
            return Ok(outcome.path)
        return Ok("")

    def _validate_and_generate(self, state: SessionState) -> Ok[GenerationOutcome] | Err[GenerationError]:
        if state.type not in GENERATION_TYPES:
            return Err(GenerationError(f"Unknown generation type: {state.type}"))
        if not Path(state.fs_path).is_dir():
            return Err(NotADirectory(f"Select a folder to generate a barrel file for: {state.fs_path} is not a directory"))

        self.phase = PHASE_GENERATING
        return self._generate(state, to_posix_path(state.fs_path).rstrip("/") or "/")

    def _generate(self, state: SessionState, target_path: str) -> Ok[GenerationOutcome] | Err[GenerationError]:
        """Generate the barrel for ``target_path`` (POSIX) and, when recursive, its children."""
        generation_type = state.type
        skip_empty = self.config.skip_empty
        barrel_name = compute_barrel_name(target_path, self.config)

        if generation_type == REGULAR_SUBFOLDERS:
            try:
                files = collect_flattened(barrel_name, target_path, self.config)
            except OSError as exc:
                return Err(FileSystemError.from_os_error("read directory", target_path, exc))
            if not files and skip_empty:
                return Ok(Empty())
            return self._write_barrel_file(target_path, barrel_name, order_exports(files))

        try:
            files, directories = classify(barrel_name, target_path, self.config)
        except OSError as exc:
            return Err(FileSystemError.from_os_error("read directory", target_path, exc))

        if generation_type == RECURSIVE:
            for directory in directories:
                generated = self._generate(state, f"{target_path}/{directory}")
                if generated.is_err():
                    self.logger.error(str(generated.error))
                    continue
                outcome = generated.value
                # Only skip_empty produces Empty, and an unwritten child is never listed.
                if isinstance(outcome, Empty):
                    continue
                child_barrel = to_posix_path(outcome.path).rsplit("/", 1)[-1]
                files.append(f"{directory}/{child_barrel}")

        if not files and skip_empty:
            return Ok(Empty())

        return self._write_barrel_file(target_path, barrel_name, order_exports(files))

    def _write_barrel_file(
        self,
        target_path: str,
        barrel_name: str,
        files: list[str],
    ) -> Ok[WrittenAt] | Err[GenerationError]:
        """Write ``files`` as export lines to ``<target_path>/<barrel_name>.dart``."""
        prefix = ""
        if self.config.prepend_package_to_lib_export and is_library_root(target_path):
            resolved = resolve_package_prefix(target_path)
            if resolved.is_err():
                return resolved
            prefix = resolved.value

        content = "".join(f"export '{prefix}{file}';\n" for file in files)
        self.logger.log(self._format(f"Exporting {target_path} - found {len(files)} Dart files"))

        barrel_path = to_os_specific_path(f"{target_path}/{barrel_name}{DART_EXTENSION}")
        try:
            Path(barrel_path).write_text(content, encoding="utf-8", errors="surrogateescape", newline="\n")
        except (OSError, UnicodeError) as exc:
            return Err(FileSystemError.from_os_error("write barrel file", barrel_path, exc))

        self.logger.log(self._format(f"Generated successful barrel file at {barrel_path}"))
        return Ok(WrittenAt(barrel_path))


def create_session(
    config: GenerationConfig,
    logger: GenerationLogger | None = None,
    options: SessionOptions | None = None,
) -> GenerationSession:
    """Create a single-shot generation session."""
    return GenerationSession(config, logger if logger is not None else LoggingLogger(), options)


__all__ = [
    "REGULAR",
    "RECURSIVE",
    "REGULAR_SUBFOLDERS",
    "GENERATION_TYPES",
    "PHASE_UNINITIALIZED",
    "PHASE_VALIDATING",
    "PHASE_GENERATING",
    "PHASE_DONE",
    "PHASE_FAILED",
    "SessionOptions",
    "SessionState",
    "UninitializedState",
    "GenerationSession",
    "create_session",
]
