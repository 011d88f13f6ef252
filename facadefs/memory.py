"""In-memory storage adapter and filesystem."""

from __future__ import annotations

import time
from dataclasses import dataclass
from io import BytesIO
from typing import Any, BinaryIO, Iterator

from .base import CONFIG_VISIBILITY, DirectoryAttributes, FileAttributes, StorageAttributes, Visibility
from .errors import (
    UnableToCopyFile,
    UnableToCreateDirectory,
    UnableToDeleteDirectory,
    UnableToDeleteFile,
    UnableToMoveFile,
    UnableToReadFile,
    UnableToRetrieveMetadata,
    UnableToWriteFile,
)
from .facade import Filesystem


@dataclass
class StoredObject:
    contents: bytes
    last_modified: int
    visibility: str


class MemoryAdapter:
    """Simple in-memory storage adapter.

    Stores files as ``bytes`` in a plain dict keyed by path. In the default
    flat mode it behaves like an object store: directories are only implied
    by key prefixes or by zero-byte placeholder entries made with
    ``create_directory``. With ``real_directories=True`` it keeps an explicit
    directory set instead, and writes create their parent directories.

    ``read_only=True`` makes every mutating call fail, which is handy for
    exercising error paths.
    """

    def __init__(self, real_directories: bool = False, read_only: bool = False) -> None:
        self.real_directories = real_directories
        self.read_only = read_only
        self.files: dict[str, StoredObject] = {}
        self.dirs: dict[str, int] = {}

    def read(self, path: str) -> bytes:
        key = self._key(path)
        if key not in self.files:
            raise UnableToReadFile(f"Unable to read file from location: {path}. File not found", path)
        return self.files[key].contents

    def read_stream(self, path: str) -> BinaryIO:
        return BytesIO(self.read(path))

    def write(self, path: str, contents: bytes, config: dict[str, Any]) -> None:
        key = self._key(path)
        if self.read_only:
            raise UnableToWriteFile(f"Unable to write file at location: {path}. Read-only storage", path)
        if not key or key in self.dirs:
            raise UnableToWriteFile(f"Unable to write file at location: {path}. Is a directory", path)
        self.files[key] = StoredObject(
            contents=contents,
            last_modified=config.get("timestamp") or self._now(),
            visibility=config.get(CONFIG_VISIBILITY, Visibility.PUBLIC.value),
        )
        if self.real_directories:
            self._make_parents(key)

    def write_stream(self, path: str, stream: BinaryIO, config: dict[str, Any]) -> None:
        self.write(path, stream.read(), config)

    def delete(self, path: str) -> None:
        if self.read_only:
            raise UnableToDeleteFile(f"Unable to delete file located at: {path}. Read-only storage", path)
        self.files.pop(self._key(path), None)

    def move(self, source: str, destination: str) -> None:
        src, dst = self._key(source), self._key(destination)
        if self.read_only:
            raise UnableToMoveFile(f"Unable to move file from {source} to {destination}. Read-only storage", source)
        if src not in self.files:
            raise UnableToMoveFile(f"Unable to move file from {source} to {destination}. Source not found", source)
        self.files[dst] = self.files.pop(src)
        if self.real_directories:
            self._make_parents(dst)

    def copy(self, source: str, destination: str) -> None:
        src, dst = self._key(source), self._key(destination)
        if self.read_only:
            raise UnableToCopyFile(f"Unable to copy file from {source} to {destination}. Read-only storage", source)
        if src not in self.files:
            raise UnableToCopyFile(f"Unable to copy file from {source} to {destination}. Source not found", source)
        original = self.files[src]
        self.files[dst] = StoredObject(original.contents, self._now(), original.visibility)
        if self.real_directories:
            self._make_parents(dst)

    def file_exists(self, path: str) -> bool:
        return self._key(path) in self.files

    def directory_exists(self, path: str) -> bool:
        key = self._key(path)
        if not key or key in self.dirs:
            return True
        if self.real_directories:
            return False
        prefix = key + "/"
        return any(k.startswith(prefix) for k in self.files) or any(
            d.startswith(prefix) for d in self.dirs
        )

    def file_size(self, path: str) -> int:
        return len(self._stat(path).contents)

    def last_modified(self, path: str) -> int:
        return self._stat(path).last_modified

    def create_directory(self, path: str, config: dict[str, Any]) -> None:
        key = self._key(path)
        if self.read_only:
            raise UnableToCreateDirectory(f"Unable to create a directory at {path}. Read-only storage", path)
        if key in self.files:
            raise UnableToCreateDirectory(f"Unable to create a directory at {path}. File exists", path)
        if not key:
            return
        self.dirs.setdefault(key, config.get("timestamp") or self._now())
        if self.real_directories:
            self._make_parents(key)

    def delete_directory(self, path: str) -> None:
        key = self._key(path)
        if self.read_only:
            raise UnableToDeleteDirectory(f"Unable to delete directory located at: {path}. Read-only storage", path)
        prefix = key + "/" if key else ""
        for k in [k for k in self.files if k.startswith(prefix)]:
            del self.files[k]
        for d in [d for d in self.dirs if d == key or d.startswith(prefix)]:
            del self.dirs[d]

    def list_contents(self, path: str, deep: bool) -> Iterator[StorageAttributes]:
        """List entries under ``path``.

        Works on a snapshot of the keys taken when iteration starts, so the
        caller may mutate the adapter while consuming the listing.
        """
        key = self._key(path)
        prefix = key + "/" if key else ""

        files: dict[str, StoredObject] = {}
        directories: dict[str, int] = {}

        for file_key, stored in list(self.files.items()):
            if not file_key.startswith(prefix):
                continue
            parts = file_key[len(prefix):].split("/")
            for i in range(1, len(parts)):
                if not deep and i > 1:
                    break
                dir_key = prefix + "/".join(parts[:i])
                directories[dir_key] = max(directories.get(dir_key, 0), stored.last_modified)
            if deep or len(parts) == 1:
                files[file_key] = stored

        for dir_key, modified in list(self.dirs.items()):
            if not dir_key.startswith(prefix):
                continue
            parts = dir_key[len(prefix):].split("/")
            depth = len(parts) if deep else 1
            for i in range(1, depth + 1):
                ancestor = prefix + "/".join(parts[:i])
                if ancestor not in directories or ancestor == dir_key:
                    directories[ancestor] = self.dirs.get(ancestor, modified)

        for entry_key in sorted([*files, *directories]):
            if entry_key in directories:
                yield DirectoryAttributes(entry_key, directories[entry_key])
            else:
                stored = files[entry_key]
                yield FileAttributes(entry_key, stored.last_modified, len(stored.contents))

    def visibility(self, path: str) -> str:
        """Visibility a file was written with."""
        return self._stat(path).visibility

    def _stat(self, path: str) -> StoredObject:
        key = self._key(path)
        if key not in self.files:
            raise UnableToRetrieveMetadata(f"Unable to retrieve the metadata for file at location: {path}", path)
        return self.files[key]

    def _make_parents(self, key: str) -> None:
        parts = key.split("/")
        for i in range(1, len(parts)):
            self.dirs.setdefault("/".join(parts[:i]), self._now())

    def _key(self, path: str) -> str:
        return path.strip("/")

    def _now(self) -> int:
        return int(time.time())


class MemoryFilesystem(Filesystem):
    """Filesystem backed by a MemoryAdapter.

    Useful for testing and as a lightweight stand-in for a remote backend.
    """

    def __init__(
        self,
        real_directories: bool = False,
        read_only: bool = False,
        has_urls: bool = False,
        folders_have_trailing_slashes: bool = True,
    ):
        super().__init__(
            has_urls=has_urls,
            folders_have_trailing_slashes=folders_have_trailing_slashes,
        )
        self.real_directories = real_directories
        self.read_only = read_only

    def create_adapter(self) -> MemoryAdapter:
        return MemoryAdapter(real_directories=self.real_directories, read_only=self.read_only)
