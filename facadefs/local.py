"""Local disk storage adapter with path restriction.

Provides real filesystem access restricted to a root directory. Unlike flat
object stores, the local disk has real directory objects.
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Any, BinaryIO, Iterator

from .base import CONFIG_VISIBILITY, DirectoryAttributes, FileAttributes, StorageAttributes, Visibility
from .errors import (
    UnableToCopyFile,
    UnableToCreateDirectory,
    UnableToMoveFile,
    UnableToReadFile,
    UnableToRetrieveMetadata,
    UnableToWriteFile,
)
from .facade import Filesystem

FILE_PERMISSIONS = {Visibility.PUBLIC.value: 0o644, Visibility.PRIVATE.value: 0o600}
DIRECTORY_PERMISSIONS = {Visibility.PUBLIC.value: 0o755, Visibility.PRIVATE.value: 0o700}


class LocalAdapter:
    """Storage adapter over a directory on the local disk.

    All keys are resolved inside the configured root directory.

    Security features:
    - Rejects paths outside root directory
    - Handles symlinks securely (validates resolved paths)
    """

    def __init__(self, root: str | Path):
        """Initialize local storage.

        Args:
            root: Directory to store files under. Created if missing.

        Raises:
            ValueError: If root exists but is not a directory.
        """
        self.root = Path(root).resolve()
        if not self.root.exists():
            self.root.mkdir(parents=True, exist_ok=True)
        if not self.root.is_dir():
            raise ValueError(f"Root must be a directory: {root}")

    def read(self, path: str) -> bytes:
        resolved = self._validate_path(path)
        if not resolved.is_file():
            raise UnableToReadFile(f"Unable to read file from location: {path}. File not found", path)
        return resolved.read_bytes()

    def read_stream(self, path: str) -> BinaryIO:
        resolved = self._validate_path(path)
        if not resolved.is_file():
            raise UnableToReadFile(f"Unable to read file from location: {path}. File not found", path)
        return resolved.open("rb")

    def write(self, path: str, contents: bytes, config: dict[str, Any]) -> None:
        mode = self._file_mode(path, config)
        resolved = self._prepare_target(path)
        resolved.write_bytes(contents)
        if mode is not None:
            resolved.chmod(mode)

    def write_stream(self, path: str, stream: BinaryIO, config: dict[str, Any]) -> None:
        mode = self._file_mode(path, config)
        resolved = self._prepare_target(path)
        with resolved.open("wb") as f:
            shutil.copyfileobj(stream, f)
        if mode is not None:
            resolved.chmod(mode)

    def delete(self, path: str) -> None:
        resolved = self._validate_path(path)
        if resolved.is_dir():
            raise IsADirectoryError(f"Is a directory: {path}")
        resolved.unlink(missing_ok=True)

    def move(self, source: str, destination: str) -> None:
        src = self._validate_path(source)
        dst = self._validate_path(destination)
        if not src.is_file():
            raise UnableToMoveFile(f"Unable to move file from {source} to {destination}. Source not found", source)
        dst.parent.mkdir(parents=True, exist_ok=True)
        os.replace(src, dst)

    def copy(self, source: str, destination: str) -> None:
        src = self._validate_path(source)
        dst = self._validate_path(destination)
        if not src.is_file():
            raise UnableToCopyFile(f"Unable to copy file from {source} to {destination}. Source not found", source)
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dst)

    def file_exists(self, path: str) -> bool:
        return self._validate_path(path).is_file()

    def directory_exists(self, path: str) -> bool:
        return self._validate_path(path).is_dir()

    def file_size(self, path: str) -> int:
        return self._stat(path).st_size

    def last_modified(self, path: str) -> int:
        return int(self._stat(path).st_mtime)

    def create_directory(self, path: str, config: dict[str, Any]) -> None:
        resolved = self._validate_path(path)
        visibility = config.get(CONFIG_VISIBILITY)
        if visibility is not None and visibility not in DIRECTORY_PERMISSIONS:
            raise UnableToCreateDirectory(
                f"Unable to create a directory at {path}. Unknown visibility: {visibility}", path
            )
        resolved.mkdir(parents=True, exist_ok=True)
        if visibility is not None:
            resolved.chmod(DIRECTORY_PERMISSIONS[visibility])

    def delete_directory(self, path: str) -> None:
        resolved = self._validate_path(path)
        if resolved == self.root:
            for child in resolved.iterdir():
                if child.is_dir() and not child.is_symlink():
                    shutil.rmtree(child)
                else:
                    child.unlink()
        elif resolved.is_dir():
            shutil.rmtree(resolved)

    def list_contents(self, path: str, deep: bool) -> Iterator[StorageAttributes]:
        """Walk a directory lazily, one sorted directory level at a time."""
        resolved = self._validate_path(path)
        if not resolved.is_dir():
            return
        yield from self._walk(resolved, deep)

    def _walk(self, directory: Path, deep: bool) -> Iterator[StorageAttributes]:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
        for entry in entries:
            key = Path(entry.path).relative_to(self.root).as_posix()
            if entry.is_symlink():
                # Links leading out of the root are not listed.
                try:
                    self._validate_path(key)
                except PermissionError:
                    continue
            stat = entry.stat()
            if entry.is_dir():
                yield DirectoryAttributes(key, int(stat.st_mtime))
                if deep and not entry.is_symlink():
                    yield from self._walk(Path(entry.path), deep)
            else:
                yield FileAttributes(key, int(stat.st_mtime), stat.st_size)

    def _prepare_target(self, path: str) -> Path:
        resolved = self._validate_path(path)
        if resolved.is_dir():
            raise IsADirectoryError(f"Is a directory: {path}")
        resolved.parent.mkdir(parents=True, exist_ok=True)
        return resolved

    def _file_mode(self, path: str, config: dict[str, Any]) -> int | None:
        visibility = config.get(CONFIG_VISIBILITY)
        if visibility is None:
            return None
        if visibility not in FILE_PERMISSIONS:
            raise UnableToWriteFile(f"Unable to write file at location: {path}. Unknown visibility: {visibility}", path)
        return FILE_PERMISSIONS[visibility]

    def _stat(self, path: str) -> os.stat_result:
        resolved = self._validate_path(path)
        if not resolved.is_file():
            raise UnableToRetrieveMetadata(f"Unable to retrieve the metadata for file at location: {path}", path)
        return resolved.stat()

    def _validate_path(self, path: str) -> Path:
        """Validate and resolve path to ensure it's within root.

        Args:
            path: Key relative to the root. A leading slash is ignored.

        Returns:
            Resolved absolute path within root.

        Raises:
            PermissionError: If path escapes root directory.
        """
        resolved = (self.root / path.lstrip("/")).resolve()

        # Final boundary check
        try:
            resolved.relative_to(self.root)
        except ValueError:
            raise PermissionError(
                f"Path outside root: {resolved} (root: {self.root})"
            )

        return resolved


class LocalFilesystem(Filesystem):
    """Filesystem over a directory on the local disk.

    Local directories are stored without a trailing slash.
    """

    def __init__(
        self,
        root: str | Path,
        has_urls: bool = False,
        folders_have_trailing_slashes: bool = False,
    ):
        super().__init__(
            has_urls=has_urls,
            folders_have_trailing_slashes=folders_have_trailing_slashes,
        )
        self.root = root

    def create_adapter(self) -> LocalAdapter:
        return LocalAdapter(self.root)
