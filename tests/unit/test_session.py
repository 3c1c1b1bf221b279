"""Generation session behavior against real temporary directory trees."""

from __future__ import annotations

import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from barrelgen.config import GenerationConfig
from barrelgen.context import (
    PHASE_DONE,
    PHASE_FAILED,
    PHASE_UNINITIALIZED,
    RECURSIVE,
    REGULAR,
    REGULAR_SUBFOLDERS,
    SessionOptions,
    create_session,
)
from barrelgen.errors import FileSystemError, GenerationError, NotADirectory, Uninitialized
from barrelgen.paths import to_posix_path


def _logger() -> mock.Mock:
    return mock.Mock(spec=["log", "warn", "error", "done"])


def _touch(root: Path, *relative_paths: str) -> None:
    for relative in relative_paths:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("", encoding="utf-8")


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _start(root: Path, generation_type: str, config: GenerationConfig | None = None, logger=None):
    session = create_session(
        config if config is not None else GenerationConfig(),
        logger if logger is not None else _logger(),
        SessionOptions(log_timestamps=False),
    )
    return session, session.start(str(root), to_posix_path(root), generation_type)


class ComponentsTreeTests(unittest.TestCase):
    """``components/{a.dart, b.freezed.dart, nested/c.dart}``."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve() / "components"
        _touch(self.root, "a.dart", "b.freezed.dart", "nested/c.dart")
        self.config = GenerationConfig(exclude_freezed=True)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_regular_exports_only_direct_files(self) -> None:
        _session, result = _start(self.root, REGULAR, self.config)

        self.assertTrue(result.is_ok())
        self.assertEqual(Path(result.unwrap()), self.root / "components.dart")
        self.assertEqual(_read(self.root / "components.dart"), "export 'a.dart';\n")
        self.assertFalse((self.root / "nested" / "nested.dart").exists())

    def test_recursive_writes_children_first_and_lists_their_barrels(self) -> None:
        logger = _logger()
        _session, result = _start(self.root, RECURSIVE, self.config, logger)

        self.assertTrue(result.is_ok())
        self.assertEqual(_read(self.root / "nested" / "nested.dart"), "export 'c.dart';\n")
        self.assertEqual(
            _read(self.root / "components.dart"),
            "export 'a.dart';\nexport 'nested/nested.dart';\n",
        )
        written = [
            call.args[0]
            for call in logger.log.call_args_list
            if call.args[0].startswith("Generated successful barrel file at ")
        ]
        self.assertEqual(len(written), 2)
        self.assertTrue(written[0].endswith("nested.dart"))
        self.assertTrue(written[1].endswith("components.dart"))

    def test_subfolders_flattens_the_subtree_into_one_barrel(self) -> None:
        _session, result = _start(self.root, REGULAR_SUBFOLDERS, self.config)

        self.assertTrue(result.is_ok())
        self.assertEqual(
            _read(self.root / "components.dart"),
            "export 'a.dart';\nexport 'nested/c.dart';\n",
        )
        self.assertFalse((self.root / "nested" / "nested.dart").exists())

    def test_rerun_produces_identical_output(self) -> None:
        for generation_type in (REGULAR, RECURSIVE, REGULAR_SUBFOLDERS):
            with self.subTest(generation_type=generation_type):
                _start(self.root, generation_type, self.config)
                first = _read(self.root / "components.dart")
                _start(self.root, generation_type, self.config)
                self.assertEqual(_read(self.root / "components.dart"), first)

    def test_excluded_directory_is_never_descended(self) -> None:
        config = self.config.replace(exclude_dir_list=["**/nested"])

        _start(self.root, RECURSIVE, config)
        self.assertFalse((self.root / "nested" / "nested.dart").exists())
        self.assertEqual(_read(self.root / "components.dart"), "export 'a.dart';\n")

        _start(self.root, REGULAR_SUBFOLDERS, config)
        self.assertEqual(_read(self.root / "components.dart"), "export 'a.dart';\n")

    def test_custom_barrel_name_is_used_for_the_output_file(self) -> None:
        config = self.config.replace(default_barrel_name="custom_barrel")

        _session, result = _start(self.root, REGULAR, config)

        self.assertEqual(Path(result.unwrap()), self.root / "custom_barrel.dart")
        self.assertEqual(_read(self.root / "custom_barrel.dart"), "export 'a.dart';\n")


class SkipEmptyTests(unittest.TestCase):
    def test_empty_directory_is_skipped_when_enabled(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "empty"
            _touch(root, "notes.txt")

            session, result = _start(root, REGULAR, GenerationConfig(skip_empty=True))

            self.assertEqual(result.unwrap(), "")
            self.assertFalse((root / "empty.dart").exists())
            self.assertEqual(session.phase, PHASE_DONE)

    def test_empty_directory_still_gets_a_file_when_disabled(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "empty"
            root.mkdir()

            _session, result = _start(root, REGULAR, GenerationConfig(skip_empty=False))

            self.assertTrue(result.is_ok())
            self.assertEqual(_read(root / "empty.dart"), "")

    def test_recursive_parent_omits_skipped_children(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "src"
            _touch(root, "main.dart", "empty/readme.md", "full/a.dart")

            _start(root, RECURSIVE, GenerationConfig(skip_empty=True))

            self.assertFalse((root / "empty" / "empty.dart").exists())
            self.assertEqual(
                _read(root / "src.dart"),
                "export 'full/full.dart';\nexport 'main.dart';\n",
            )

    def test_recursive_parent_lists_empty_children_when_not_skipping(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "src"
            _touch(root, "main.dart", "empty/readme.md")

            _start(root, RECURSIVE, GenerationConfig(skip_empty=False))

            self.assertEqual(_read(root / "empty" / "empty.dart"), "")
            self.assertEqual(
                _read(root / "src.dart"),
                "export 'empty/empty.dart';\nexport 'main.dart';\n",
            )

    def test_recursive_tree_without_exports_yields_empty_result(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "src"
            _touch(root, "a/b/readme.md")

            _session, result = _start(root, RECURSIVE, GenerationConfig(skip_empty=True))

            self.assertEqual(result.unwrap(), "")
            self.assertEqual(list(root.rglob("*.dart")), [])


class PackagePrefixTests(unittest.TestCase):
    def test_library_root_exports_are_package_prefixed(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "my_package" / "lib"
            _touch(root, "main.dart", "component.dart")

            _start(root, REGULAR, GenerationConfig(prepend_package_to_lib_export=True))

            self.assertEqual(
                _read(root / "lib.dart"),
                "export 'package:my_package/component.dart';\nexport 'package:my_package/main.dart';\n",
            )

    def test_prefix_applies_only_to_the_library_root_barrel(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "my_package" / "lib"
            _touch(root, "main.dart", "src/widget.dart")

            _start(root, RECURSIVE, GenerationConfig(prepend_package_to_lib_export=True))

            self.assertEqual(_read(root / "src" / "src.dart"), "export 'widget.dart';\n")
            self.assertEqual(
                _read(root / "lib.dart"),
                "export 'package:my_package/main.dart';\nexport 'package:my_package/src/src.dart';\n",
            )

    def test_prefix_is_not_applied_outside_library_root(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "my_package" / "src"
            _touch(root, "main.dart")

            _start(root, REGULAR, GenerationConfig(prepend_package_to_lib_export=True))

            self.assertEqual(_read(root / "src.dart"), "export 'main.dart';\n")


class SessionErrorTests(unittest.TestCase):
    def test_file_target_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp).resolve() / "file.txt"
            target.write_text("x", encoding="utf-8")

            session, result = _start(target, REGULAR)

            self.assertTrue(result.is_err())
            self.assertIsInstance(result.unwrap_err(), NotADirectory)
            self.assertEqual(session.phase, PHASE_FAILED)

    def test_missing_target_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            _session, result = _start(Path(tmp).resolve() / "missing", RECURSIVE)

            self.assertIsInstance(result.unwrap_err(), NotADirectory)

    def test_unknown_generation_type_is_rejected(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            _session, result = _start(Path(tmp).resolve(), "SIDEWAYS")

            self.assertIsInstance(result.unwrap_err(), GenerationError)
            self.assertIn("SIDEWAYS", str(result.unwrap_err()))

    def test_write_failure_is_returned_not_raised(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "components"
            _touch(root, "a.dart")

            with mock.patch.object(Path, "write_text", side_effect=OSError(13, "Permission denied")):
                session, result = _start(root, REGULAR)

            error = result.unwrap_err()
            self.assertIsInstance(error, FileSystemError)
            self.assertIn("Permission denied", str(error))
            self.assertIsInstance(error.cause, OSError)
            self.assertEqual(session.phase, PHASE_FAILED)

    def test_failed_child_is_logged_and_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "components"
            _touch(root, "a.dart", "broken/b.dart", "fine/c.dart")
            real_write_text = Path.write_text

            def failing_write(self: Path, *args, **kwargs):
                if self.name == "broken.dart":
                    raise OSError(13, "Permission denied")
                return real_write_text(self, *args, **kwargs)

            logger = _logger()
            with mock.patch.object(Path, "write_text", new=failing_write):
                _session, result = _start(root, RECURSIVE, logger=logger)

            self.assertTrue(result.is_ok())
            self.assertEqual(
                _read(root / "components.dart"),
                "export 'a.dart';\nexport 'fine/fine.dart';\n",
            )
            logger.error.assert_called_once()
            self.assertIn("broken.dart", logger.error.call_args.args[0])

    @unittest.skipIf(os.name == "nt", "POSIX file names are arbitrary bytes")
    def test_undecodable_file_name_round_trips(self) -> None:
        if sys.getfilesystemencoding().lower().replace("-", "") != "utf8":
            self.skipTest("needs a UTF-8 file system encoding")
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "src"
            _touch(root, "a.dart")
            (root / "child").mkdir()
            try:
                (root / "child" / os.fsdecode(b"\xff.dart")).write_bytes(b"")
            except OSError:
                self.skipTest("file system rejects non-UTF-8 names")

            logger = _logger()
            _session, result = _start(root, RECURSIVE, logger=logger)

            self.assertTrue(result.is_ok())
            self.assertEqual((root / "child" / "child.dart").read_bytes(), b"export '\xff.dart';\n")
            self.assertEqual(_read(root / "src.dart"), "export 'a.dart';\nexport 'child/child.dart';\n")
            logger.error.assert_not_called()

    def test_encoding_failure_is_returned_not_raised(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve() / "components"
            _touch(root, "a.dart")
            failure = UnicodeEncodeError("utf-8", "\ud800", 0, 1, "surrogates not allowed")

            with mock.patch.object(Path, "write_text", side_effect=failure):
                session, result = _start(root, REGULAR)

            error = result.unwrap_err()
            self.assertIsInstance(error, FileSystemError)
            self.assertIn("surrogates not allowed", str(error))
            self.assertIs(error.cause, failure)
            self.assertEqual(session.phase, PHASE_FAILED)


class SessionAccessorTests(unittest.TestCase):
    def test_accessors_fail_before_start(self) -> None:
        session = create_session(GenerationConfig(), _logger())

        self.assertEqual(session.phase, PHASE_UNINITIALIZED)
        self.assertIsInstance(session.fs_path.unwrap_err(), Uninitialized)
        self.assertIsInstance(session.path.unwrap_err(), Uninitialized)

    def test_accessors_return_started_paths(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            _touch(root, "a.dart")

            session, _result = _start(root, REGULAR)

            self.assertEqual(session.fs_path.unwrap(), str(root))
            self.assertEqual(session.path.unwrap(), to_posix_path(root))

    def test_start_logs_type_and_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            logger = _logger()

            _start(root, RECURSIVE, logger=logger)

            logger.log.assert_any_call("Generation started")
            logger.log.assert_any_call(f"Type: recursive - Path: {root}")
            logger.log.assert_any_call(f"Exporting {to_posix_path(root)} - found 0 Dart files")

    def test_timestamps_prefix_log_lines_by_default(self) -> None:
        logger = _logger()
        session = create_session(GenerationConfig(), logger)

        session.end_generation()

        message = logger.done.call_args.args[0]
        self.assertRegex(message, r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] Generation finished$")

    def test_on_error_logs_message(self) -> None:
        logger = _logger()
        session = create_session(GenerationConfig(), logger, SessionOptions(log_timestamps=False))

        session.on_error("Test error message")

        logger.log.assert_called_once_with("An error occurred:")
        logger.error.assert_called_once_with("Test error message")

    def test_end_generation_does_not_reset_state(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp).resolve()
            logger = _logger()
            session, _result = _start(root, REGULAR, logger=logger)

            session.end_generation()

            logger.done.assert_called_once_with("Generation finished")
            self.assertEqual(session.phase, PHASE_DONE)
            self.assertEqual(session.fs_path.unwrap(), str(root))


if __name__ == "__main__":
    unittest.main()
