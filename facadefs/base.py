"""Base storage interface and dataclasses.

Defines the adapter capability contract that every backend implements, the
raw attributes an adapter reports while listing, and the normalized listing
record handed to callers.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Iterable, Protocol, runtime_checkable

CONFIG_VISIBILITY = "visibility"


class Visibility(str, Enum):
    """Readability of a written object."""

    PUBLIC = "public"
    PRIVATE = "private"


class ListingKind(str, Enum):
    FILE = "file"
    DIR = "dir"


@dataclass(frozen=True)
class FileAttributes:
    """A file as reported by an adapter listing.

    Attributes:
        path: Full key of the file, without leading or trailing slash.
        last_modified: Unix timestamp of the last modification.
        file_size: Size in bytes.
    """

    path: str
    last_modified: int
    file_size: int

    @property
    def is_dir(self) -> bool:
        return False


@dataclass(frozen=True)
class DirectoryAttributes:
    """A directory (real or inferred) as reported by an adapter listing."""

    path: str
    last_modified: int

    @property
    def is_dir(self) -> bool:
        return True


StorageAttributes = FileAttributes | DirectoryAttributes


@dataclass(frozen=True)
class Listing:
    """One entry of a directory listing.

    Attributes:
        dirname: Directory part of the path ("" for top-level entries).
        basename: Final path segment.
        type: File or directory.
        date_modified: Unix timestamp of the last modification.
        file_size: Size in bytes, None for directories.
    """

    dirname: str
    basename: str
    type: ListingKind
    date_modified: int
    file_size: int | None = None

    def __post_init__(self) -> None:
        if self.type is ListingKind.DIR and self.file_size is not None:
            raise ValueError(f"Directory listing cannot carry a size: {self.uri}")

    @classmethod
    def from_attributes(cls, attributes: StorageAttributes) -> Listing:
        """Translate a raw adapter entry into a listing record."""
        dirname, basename = posixpath.split(attributes.path.rstrip("/"))
        if attributes.is_dir:
            return cls(
                dirname=dirname,
                basename=basename,
                type=ListingKind.DIR,
                date_modified=attributes.last_modified,
            )
        return cls(
            dirname=dirname,
            basename=basename,
            type=ListingKind.FILE,
            date_modified=attributes.last_modified,
            file_size=attributes.file_size,
        )

    @property
    def is_dir(self) -> bool:
        return self.type is ListingKind.DIR

    @property
    def uri(self) -> str:
        """Full path of the entry, rebuilt from dirname and basename."""
        if not self.dirname:
            return self.basename
        return f"{self.dirname}/{self.basename}"


@runtime_checkable
class StorageAdapter(Protocol):
    """Primitive operations a storage backend must provide.

    The facade builds directory semantics and error handling on top of these.
    Adapters report failures by raising ``AdapterError`` subclasses or
    ``OSError``; deleting a missing key or directory is not a failure.

    Required: the facade refuses adapters missing any of these:
    """

    def read(self, path: str) -> bytes:
        """Read a whole file."""
        ...

    def read_stream(self, path: str) -> BinaryIO:
        """Open a file for streaming reads."""
        ...

    def write(self, path: str, contents: bytes, config: dict[str, Any]) -> None:
        """Write a whole file, creating parents as needed."""
        ...

    def write_stream(self, path: str, stream: BinaryIO, config: dict[str, Any]) -> None:
        """Write a file from a readable binary stream."""
        ...

    def delete(self, path: str) -> None:
        """Delete a file."""
        ...

    def move(self, source: str, destination: str) -> None:
        """Move a file to a new key."""
        ...

    def copy(self, source: str, destination: str) -> None:
        """Copy a file to a new key."""
        ...

    def file_exists(self, path: str) -> bool:
        """Check whether a file exists at exactly this key."""
        ...

    def directory_exists(self, path: str) -> bool:
        """Check whether a directory exists at this key."""
        ...

    def file_size(self, path: str) -> int:
        """Size of a file in bytes."""
        ...

    def last_modified(self, path: str) -> int:
        """Unix timestamp of the last modification of a file."""
        ...

    def create_directory(self, path: str, config: dict[str, Any]) -> None:
        """Create a directory (idempotent)."""
        ...

    def delete_directory(self, path: str) -> None:
        """Delete a directory and everything under it."""
        ...

    def list_contents(self, path: str, deep: bool) -> Iterable[StorageAttributes]:
        """Enumerate entries under a prefix."""
        ...


ADAPTER_CAPABILITIES = (
    "read",
    "read_stream",
    "write",
    "write_stream",
    "delete",
    "move",
    "copy",
    "file_exists",
    "directory_exists",
    "file_size",
    "last_modified",
    "create_directory",
    "delete_directory",
    "list_contents",
)


def missing_capabilities(adapter: object) -> list[str]:
    """Return the capability names an adapter object does not provide."""
    return [
        name
        for name in ADAPTER_CAPABILITIES
        if not callable(getattr(adapter, name, None))
    ]
