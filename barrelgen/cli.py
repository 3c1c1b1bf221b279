"""Command-line front door for barrelgen.

Parses CLI options, merges them over the configuration files, and runs one
generation session for the target directory.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import (
    GenerationConfig,
    config_from_mapping,
    load_config_file,
    load_user_config,
    save_user_config,
)
from .context import RECURSIVE, REGULAR, REGULAR_SUBFOLDERS, SessionOptions, create_session
from .errors import ConfigError, GenerationError
from .highlight import DEFAULT_STYLE, render_barrel
from .logger import GenerationLogger, LoggingLogger, configure_logging
from .paths import to_posix_path
from .result import Err, Ok

SUCCESS_MESSAGES = {
    RECURSIVE: "Successfully generated recursive barrel files for {path}",
    REGULAR: "Successfully generated barrel file for {path}",
    REGULAR_SUBFOLDERS: "Successfully generated barrel file with subfolders for {path}",
}

# argparse dest -> config-file key
_FLAG_KEYS = {
    "default_barrel_name": "defaultBarrelName",
    "excluded_dirs": "excludeDirList",
    "excluded_files": "excludeFileList",
    "exclude_freezed": "excludeFreezed",
    "exclude_generated": "excludeGenerated",
    "skip_empty": "skipEmpty",
    "append_folder_name": "appendFolderName",
    "prepend_folder_name": "prependFolderName",
    "prepend_package": "prependPackageToLibExport",
}


def run(
    directory: Path,
    generation_type: str,
    config: GenerationConfig,
    logger: GenerationLogger | None = None,
    options: SessionOptions | None = None,
) -> Ok[str] | Err[GenerationError]:
    """Run one generation session and always close it with ``end_generation``."""
    session = create_session(config, logger if logger is not None else LoggingLogger(), options)
    result = session.start(str(directory), to_posix_path(directory), generation_type)
    if result.is_err():
        session.on_error(str(result.error))
    session.end_generation()
    return result


def generation_type_from_args(args: argparse.Namespace) -> str:
    if args.recursive:
        return RECURSIVE
    if args.subfolders:
        return REGULAR_SUBFOLDERS
    return REGULAR


def build_config(args: argparse.Namespace) -> GenerationConfig:
    """Merge user defaults, the ``--config`` file, and explicit flags (in that order)."""
    data: dict[str, object] = dict(load_user_config())
    if args.config is not None:
        data.update(load_config_file(Path(args.config)))
    for dest, key in _FLAG_KEYS.items():
        value = getattr(args, dest)
        if value is not None:
            data[key] = value
    return config_from_mapping(data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="barrelgen",
        description="Generate Dart barrel files that export every file of a directory.",
    )
    parser.add_argument("directory", help="Target directory for barrel file generation.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-s", "--subfolders", action="store_true", help="Include subfolders in the barrel file.")
    mode.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="Generate barrel files recursively for all nested directories.",
    )
    parser.add_argument("-c", "--config", metavar="PATH", default=None, help="Path to a JSON configuration file.")
    parser.add_argument("-n", "--default-barrel-name", metavar="NAME", default=None, help="Default name for barrel files.")
    parser.add_argument("--excluded-dirs", metavar="GLOB", nargs="+", default=None, help="Directories to exclude.")
    parser.add_argument("--excluded-files", metavar="GLOB", nargs="+", default=None, help="Files to exclude.")
    parser.add_argument("--exclude-freezed", action="store_true", default=None, help="Exclude *.freezed.dart files.")
    parser.add_argument("--exclude-generated", action="store_true", default=None, help="Exclude *.g.dart files.")
    parser.add_argument("--skip-empty", action="store_true", default=None, help="Skip directories with no files.")
    parser.add_argument(
        "--append-folder-name",
        action="store_true",
        default=None,
        help="Append folder name to barrel file name.",
    )
    parser.add_argument(
        "--prepend-folder-name",
        action="store_true",
        default=None,
        help="Prepend folder name to barrel file name.",
    )
    parser.add_argument(
        "--prepend-package",
        action="store_true",
        default=None,
        help="Prepend package name to exports in the lib folder.",
    )
    parser.add_argument(
        "--save-defaults",
        action="store_true",
        help="Store the resulting options as per-user defaults before generating.",
    )
    parser.add_argument("--no-timestamps", action="store_true", help="Do not prefix log lines with timestamps.")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--print", dest="print_barrel", action="store_true", help="Print the generated barrel file.")
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name for --print.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output for --print.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and generate barrel files.

    Failures exit with status 1 and an ``Error:`` message on stderr.
    """
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet)

    directory = Path(args.directory).resolve()
    if not directory.exists():
        raise SystemExit(f"Error: Directory does not exist: {directory}")

    try:
        config = build_config(args)
        if args.save_defaults:
            save_user_config(config)
    except ConfigError as exc:
        raise SystemExit(f"Error: {exc}") from exc

    generation_type = generation_type_from_args(args)
    result = run(
        directory,
        generation_type,
        config,
        options=SessionOptions(log_timestamps=not args.no_timestamps),
    )
    if result.is_err():
        raise SystemExit(f"Error: {result.error}")

    print(SUCCESS_MESSAGES[generation_type].replace("{path}", str(directory)))
    if args.print_barrel and result.value:
        color = not args.no_color and sys.stdout.isatty()
        sys.stdout.write(render_barrel(Path(result.value), args.style, color=color))


if __name__ == "__main__":
    main()
