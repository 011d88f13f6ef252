"""Backend-agnostic filesystem facade.

Provides the Filesystem base class: a uniform file and directory API over a
pluggable StorageAdapter. Directory semantics (existence, creation, deletion
and rename) are emulated from primitive adapter calls, so the same code works
for backends with real directories and for flat object stores.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Callable, Iterator

from .base import (
    CONFIG_VISIBILITY,
    Listing,
    StorageAdapter,
    Visibility,
    missing_capabilities,
)
from .config import FsSettings
from .errors import (
    ADAPTER_ERRORS,
    AdapterUnavailable,
    CopyFailed,
    DirectoryCreateFailed,
    DirectoryDeleteFailed,
    DirectoryRenameIncomplete,
    ExistenceCheckFailed,
    FsError,
    InvalidPath,
    ListFailed,
    MetadataUnavailable,
    MoveFailed,
    ObjectNotFound,
    ReadFailed,
    WriteFailed,
    translate_errors,
)
from .paths import directory_key, normalize_path, replace_prefix, sibling_path

logger = logging.getLogger(__name__)


class Filesystem(ABC):
    """File and directory operations over a storage adapter.

    Subclasses provide ``create_adapter()``; the adapter is built on first use
    and reused for the lifetime of the instance. Every adapter call is wrapped
    so that callers only ever see ``FsError`` subclasses.

    Operations are synchronous and sequential. Multi-step operations such as
    ``rename_directory`` are not transactional: a failure part-way through
    leaves the backend in a mixed state.

    Example:
        >>> fs = MemoryFilesystem(has_urls=True)
        >>> fs.write("media/logo.png", b"...")
        >>> fs.rename_directory("media", "assets")
        >>> [entry.uri for entry in fs.list_entries("assets")]
        ['assets/logo.png']
    """

    def __init__(
        self,
        has_urls: bool = False,
        folders_have_trailing_slashes: bool = True,
    ):
        """Initialize the facade.

        Args:
            has_urls: Whether files are exposed through browsable URLs.
                Controls the visibility of written objects.
            folders_have_trailing_slashes: Whether the backend stores
                directory keys with a trailing slash.
        """
        self._settings = FsSettings(
            has_urls=has_urls,
            folders_have_trailing_slashes=folders_have_trailing_slashes,
        )
        self._adapter: StorageAdapter | None = None

    @property
    def settings(self) -> FsSettings:
        return self._settings

    @property
    def has_urls(self) -> bool:
        return self._settings.has_urls

    @property
    def folders_have_trailing_slashes(self) -> bool:
        return self._settings.folders_have_trailing_slashes

    # -------------------------------------------------------------------------
    # Adapter
    # -------------------------------------------------------------------------

    @abstractmethod
    def create_adapter(self) -> StorageAdapter:
        """Build the storage adapter for this filesystem."""

    @property
    def adapter(self) -> StorageAdapter:
        """The storage adapter, created on first access.

        Raises:
            AdapterUnavailable: If construction fails or the adapter lacks
                required capabilities. Nothing is cached in that case.
        """
        if self._adapter is not None:
            return self._adapter

        try:
            adapter = self.create_adapter()
        except (*ADAPTER_ERRORS, ValueError) as exc:
            raise AdapterUnavailable(
                f"Unable to create storage adapter: {exc}", cause=exc
            ) from exc

        missing = missing_capabilities(adapter)
        if missing:
            raise AdapterUnavailable(
                f"{type(adapter).__name__} is missing adapter capabilities: "
                + ", ".join(missing)
            )

        logger.debug("Created storage adapter %s", type(adapter).__name__)
        self._adapter = adapter
        return adapter

    # -------------------------------------------------------------------------
    # Listing
    # -------------------------------------------------------------------------

    def list_entries(self, directory: str = "", recursive: bool = True) -> Iterator[Listing]:
        """Lazily list the contents of a directory.

        The iterator is single-pass and reflects the backend while it is being
        consumed.

        Args:
            directory: Directory to list ("" for the root).
            recursive: If True, descend into subdirectories.

        Yields:
            Listing records for every file and directory found.

        Raises:
            ListFailed: If the adapter fails to enumerate the directory.
        """
        prefix = normalize_path(directory)
        message = "Unable to list files" + (f" in {directory}" if directory else "")
        try:
            for attributes in self.adapter.list_contents(prefix, recursive):
                yield Listing.from_attributes(attributes)
        except ADAPTER_ERRORS as exc:
            raise ListFailed(message, directory, exc) from exc

    # -------------------------------------------------------------------------
    # Files
    # -------------------------------------------------------------------------

    def get_file_size(self, path: str) -> int:
        """Size of a file in bytes.

        Raises:
            MetadataUnavailable: If the size cannot be retrieved.
        """
        with translate_errors(
            MetadataUnavailable, path, f"Unable to get filesize for “{path}”"
        ):
            return self.adapter.file_size(normalize_path(path))

    def get_date_modified(self, path: str) -> int:
        """Unix timestamp of a file's last modification.

        Raises:
            MetadataUnavailable: If the timestamp cannot be retrieved.
        """
        with translate_errors(
            MetadataUnavailable, path, f"Unable to get date modified for “{path}”"
        ):
            return self.adapter.last_modified(normalize_path(path))

    def write(self, path: str, contents: bytes, config: dict[str, Any] | None = None) -> None:
        """Write bytes to a file.

        Args:
            path: File path.
            contents: File contents.
            config: Options passed through to the adapter. ``visibility`` is
                always set from the facade's visibility policy.

        Raises:
            WriteFailed: If the adapter rejects the write.
        """
        config = self.add_file_metadata_to_config(config)
        with translate_errors(WriteFailed, path, f"Unable to write to “{path}”"):
            self.adapter.write(normalize_path(path), contents, config)

    def write_stream(
        self, path: str, stream: BinaryIO, config: dict[str, Any] | None = None
    ) -> None:
        """Write a file from a readable binary stream.

        Raises:
            WriteFailed: If the adapter rejects the write.
        """
        config = self.add_file_metadata_to_config(config)
        with translate_errors(WriteFailed, path, f"Unable to write stream to “{path}”"):
            self.adapter.write_stream(normalize_path(path), stream, config)

    def read(self, path: str) -> bytes:
        """Read a whole file.

        Raises:
            ReadFailed: If the file cannot be read.
        """
        with translate_errors(ReadFailed, path):
            return self.adapter.read(normalize_path(path))

    def read_stream(self, path: str) -> BinaryIO:
        """Open a file for streaming reads.

        Raises:
            ReadFailed: If the file cannot be opened.
        """
        with translate_errors(ReadFailed, path):
            return self.adapter.read_stream(normalize_path(path))

    def file_exists(self, path: str) -> bool:
        """Check whether a file exists.

        Raises:
            ExistenceCheckFailed: If the backend cannot answer.
        """
        with translate_errors(
            ExistenceCheckFailed, path, f"Unable to check if {path} exists"
        ):
            return self.adapter.file_exists(normalize_path(path))

    def delete_file(self, path: str) -> None:
        """Delete a file.

        Failures are logged and swallowed: a file that is already gone is an
        acceptable outcome of a delete.
        """
        try:
            self.adapter.delete(normalize_path(path))
        except ADAPTER_ERRORS as exc:
            logger.info("Ignoring failed delete of %s: %s", path, exc)

        self._invalidate(path)

    def rename_file(self, path: str, new_path: str) -> None:
        """Move a file to a new path.

        Raises:
            MoveFailed: If the adapter cannot move the file.
        """
        with translate_errors(MoveFailed, path):
            self.adapter.move(normalize_path(path), normalize_path(new_path))

        self._invalidate(path)

    def copy_file(self, path: str, new_path: str) -> None:
        """Copy a file to a new path.

        Raises:
            CopyFailed: If the adapter cannot copy the file.
        """
        with translate_errors(CopyFailed, path):
            self.adapter.copy(normalize_path(path), normalize_path(new_path))

    # -------------------------------------------------------------------------
    # Directories
    # -------------------------------------------------------------------------

    def directory_exists(self, path: str) -> bool:
        """Check whether a directory exists.

        Asks the adapter directly with the backend's directory key, so a
        significant trailing slash is preserved.

        Raises:
            ExistenceCheckFailed: If the backend cannot answer.
        """
        key = directory_key(path, self.folders_have_trailing_slashes)
        with translate_errors(ExistenceCheckFailed, path):
            return self.adapter.directory_exists(key)

    def create_directory(self, path: str, config: dict[str, Any] | None = None) -> None:
        """Create a directory.

        Raises:
            DirectoryCreateFailed: If the adapter cannot create it.
        """
        with translate_errors(DirectoryCreateFailed, path):
            self.adapter.create_directory(normalize_path(path), dict(config or {}))

    def delete_directory(self, path: str) -> None:
        """Delete a directory and everything under it.

        Raises:
            DirectoryDeleteFailed: If the adapter cannot delete it.
        """
        with translate_errors(DirectoryDeleteFailed, path):
            self.adapter.delete_directory(normalize_path(path))

        self._invalidate(path)

    def rename_directory(self, path: str, new_name: str) -> None:
        """Rename a directory by moving every file under it.

        The directory keeps its parent: ``rename_directory("a/b", "c")``
        produces ``a/c``. Files are moved one at a time in listing order; the
        old directories left behind are then deleted on a best-effort basis.

        Args:
            path: Directory to rename.
            new_name: New final segment of the directory path.

        Raises:
            ListFailed: If the directory cannot be enumerated.
            ObjectNotFound: If there are no files under ``path`` and no
                directory exists there either.
            DirectoryRenameIncomplete: If some files could not be moved. The
                old hierarchy is left in place in that case.
            InvalidPath: If ``path`` is the root or ``new_name`` is not a
                single path segment.
        """
        path = normalize_path(path)
        if not path:
            raise InvalidPath("The root directory cannot be renamed", path)
        if normalize_path(new_name) != new_name or not new_name or "/" in new_name:
            raise InvalidPath(f"Invalid directory name: “{new_name}”", new_name)

        new_path = sibling_path(path, new_name)
        if new_path == path:
            return
        logger.debug("Renaming directory %s to %s", path, new_path)

        directories = [path]
        moved: list[str] = []
        failed: list[MoveFailed] = []

        for listing in self.list_entries(path):
            if listing.is_dir:
                directories.append(listing.uri)
                continue

            try:
                self.rename_file(listing.uri, replace_prefix(listing.uri, path, new_path))
            except MoveFailed as exc:
                logger.warning("Unable to move %s: %s", listing.uri, exc)
                failed.append(exc)
            else:
                moved.append(listing.uri)

        if failed:
            raise DirectoryRenameIncomplete(
                f"Moved {len(moved)} of {len(moved) + len(failed)} files "
                f"from “{path}” to “{new_path}”",
                path,
                moved=moved,
                failed=[exc.path or "" for exc in failed],
                cause=failed[0].cause,
            ) from failed[0]

        if not moved:
            if not self.directory_exists(path):
                raise ObjectNotFound(f"No folder exists at path: {path}", path)

            self.delete_directory(path)
            self.create_directory(new_path)

        # Files are moved but the old directories remain. Whether they exist at
        # all depends on the backend, so failures here are only logged.
        for directory in directories:
            try:
                self.delete_directory(directory)
            except FsError as exc:
                logger.warning("Unable to delete stale directory %s: %s", directory, exc)
                continue

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def invalidate_cdn_path(self, path: str) -> bool:
        """Tell a caching layer in front of the backend that a path changed.

        Override in filesystems that sit behind a CDN.

        Returns:
            Whether the invalidation succeeded.
        """
        return True

    def visibility(self) -> Visibility:
        """Visibility for written objects, derived from ``has_urls``."""
        return Visibility.PUBLIC if self.has_urls else Visibility.PRIVATE

    def add_file_metadata_to_config(self, config: dict[str, Any] | None) -> dict[str, Any]:
        """Return a copy of ``config`` annotated with the visibility policy."""
        return {**(config or {}), CONFIG_VISIBILITY: self.visibility().value}

    def _invalidate(self, path: str) -> None:
        try:
            invalidated = self.invalidate_cdn_path(path)
        except Exception:
            logger.warning("CDN invalidation raised for %s", path, exc_info=True)
            return
        if not invalidated:
            logger.info("CDN invalidation failed for %s", path)


class AdapterFilesystem(Filesystem):
    """Filesystem over any adapter factory.

    Example:
        >>> fs = AdapterFilesystem(lambda: MemoryAdapter(real_directories=True),
        ...                        folders_have_trailing_slashes=False)
    """

    def __init__(
        self,
        factory: Callable[[], StorageAdapter],
        has_urls: bool = False,
        folders_have_trailing_slashes: bool = True,
    ):
        super().__init__(
            has_urls=has_urls,
            folders_have_trailing_slashes=folders_have_trailing_slashes,
        )
        self._factory = factory

    def create_adapter(self) -> StorageAdapter:
        return self._factory()
