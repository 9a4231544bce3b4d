"""Temporary file management and file assertions for tests."""

import atexit
import logging
import os
import shutil
import tempfile
import threading
import time
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

# Pause before naming a temp dir so back-to-back dirs get distinct timestamps
TEMP_DIR_NAME_DELAY = 0.02


class TestFileManager:
    """
    Creates temporary files and directories for a test and deletes them again.

    Use it as a context manager (or through the ``test_file_manager`` pytest
    fixture) so clean_up() runs on every exit path::

        with TestFileManager("repo-tool.", label="test_staging") as files:
            repo_dir = files.create_temp_dir()
            ...

    With ``warn_on_exit=True`` an interpreter-exit hook logs a warning if
    tracked paths were never cleaned up.
    """

    __test__ = False  # not a pytest test class

    def __init__(
        self,
        base_filename: str,
        file_suffix: str = "",
        label: Optional[str] = None,
        temp_root: Optional[Path] = None,
        warn_on_exit: bool = False,
    ):
        """
        Initialize file manager.

        Args:
            base_filename: Prefix for temp directory and file names
            file_suffix: Suffix for temp files (e.g., ".txt")
            label: Owner name used in the cleanup warning (default: base_filename)
            temp_root: Directory for temp resources (default: system temp dir)
            warn_on_exit: Register an exit hook warning about skipped cleanup
        """
        self.base_filename = base_filename
        self.file_suffix = file_suffix
        self.label = label or base_filename
        self.temp_root = Path(temp_root) if temp_root else Path(tempfile.gettempdir())

        self._files_to_delete: list[Path] = []
        self._warn_about_cleanup = False
        self._lock = threading.RLock()

        if warn_on_exit:
            atexit.register(self.maybe_warn_about_clean_up)

    def __enter__(self) -> "TestFileManager":
        return self

    def __exit__(self, *args) -> None:
        self.clean_up()
        atexit.unregister(self.maybe_warn_about_clean_up)

    @property
    def needs_clean_up(self) -> bool:
        """Whether paths were tracked since the last clean_up()."""
        return self._warn_about_cleanup

    @property
    def tracked_paths(self) -> list[Path]:
        """Snapshot of paths awaiting deletion, in tracking order."""
        with self._lock:
            return list(self._files_to_delete)

    def maybe_warn_about_clean_up(self) -> None:
        """Log a warning if tracked paths were never cleaned up."""
        if self._warn_about_cleanup:
            logger.warning("TestFileManager from: %s not cleaned up!", self.label)

    def mark_for_deletion(self, to_delete: Path) -> None:
        """Track a path for deletion by clean_up()."""
        with self._lock:
            self._files_to_delete.append(Path(to_delete))
            self._warn_about_cleanup = True

    def create_temp_dir(self) -> Path:
        """
        Create and track a temp directory named <base_filename><epoch millis>.

        Returns:
            Path to the new directory
        """
        with self._lock:
            self.temp_root.mkdir(parents=True, exist_ok=True)
            while True:
                time.sleep(TEMP_DIR_NAME_DELAY)

                directory = self.temp_root / f"{self.base_filename}{int(time.time() * 1000)}"
                try:
                    directory.mkdir()
                except FileExistsError:
                    # Another manager with the same base name took this millisecond
                    logger.debug("Temp dir name taken, retrying: %s", directory)
                    continue
                break

            self.mark_for_deletion(directory)

            logger.debug("Created temp dir: %s", directory)
            return directory

    def create_temp_file(self) -> Path:
        """
        Create and track an empty temp file.

        Returns:
            Path to the new file
        """
        with self._lock:
            self.temp_root.mkdir(parents=True, exist_ok=True)
            fd, name = tempfile.mkstemp(
                prefix=self.base_filename, suffix=self.file_suffix, dir=self.temp_root
            )
            os.close(fd)

            temp_file = Path(name)
            self.mark_for_deletion(temp_file)
            return temp_file

    def clean_up(self) -> None:
        """
        Delete every tracked path.

        Directories are removed recursively; paths that no longer exist are
        skipped. Each path leaves the tracked list once handled.

        Raises:
            OSError: If an existing path cannot be deleted
        """
        with self._lock:
            while self._files_to_delete:
                path = self._files_to_delete[0]

                if path.is_dir() and not path.is_symlink():
                    shutil.rmtree(path)
                elif path.exists() or path.is_symlink():
                    path.unlink()

                self._files_to_delete.pop(0)

            self._warn_about_cleanup = False

    def assert_file_existence(
        self, directory: Path, filename: str, should_exist: bool
    ) -> None:
        """
        Assert whether ``directory/filename`` exists.

        Raises:
            AssertionError: If existence does not match ``should_exist``
        """
        file = Path(directory) / filename
        exists = file.exists()
        if exists != should_exist:
            expectation = "to exist" if should_exist else "not to exist"
            raise AssertionError(f"Expected {file} {expectation}")

    def assert_file_contents(
        self, directory: Path, filename: str, contents_test: str
    ) -> None:
        """
        Assert that ``directory/filename`` exists and holds exactly
        ``contents_test``.

        Raises:
            AssertionError: If the file is missing or its contents differ
            OSError: If the file cannot be read
        """
        self.assert_file_existence(directory, filename, True)

        actual = self.get_file_contents(Path(directory) / filename)
        if actual != contents_test:
            raise AssertionError(f"expected:<{contents_test!r}> but was:<{actual!r}>")

    def create_file(self, directory: Path, filename: str, contents: str) -> Path:
        """
        Write ``contents`` to ``directory/filename`` and track the file.

        Parent directories are created as needed.

        Returns:
            Path to the written file
        """
        file = Path(directory) / filename
        file.parent.mkdir(parents=True, exist_ok=True)
        # newline="" keeps \r and \r\n exactly as given
        with open(file, "w", encoding="utf-8", newline="") as f:
            f.write(contents)

        self.mark_for_deletion(file)
        return file

    def create_file_in_temp_dir(self, filename: str, contents: str) -> Path:
        """Create a file inside a fresh tracked temp directory."""
        return self.create_file(self.create_temp_dir(), filename, contents)

    def get_file_contents(self, file: Path) -> str:
        """Read a whole file as text, line endings untranslated."""
        with open(file, "r", encoding="utf-8", newline="") as f:
            return f.read()
