"""Exception hierarchy for the facadefs storage layer.

Two families live here. Adapter-level errors are what a backend raises when a
primitive operation fails. Facade-level errors (``FsError`` and subclasses)
are the only kinds callers of a ``Filesystem`` ever see: every adapter call is
wrapped by ``translate_errors`` which re-raises a failure as one normalized
kind, with the original exception kept as ``cause``.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

# ---------------------------------------------------------------------------
# Adapter-level errors
# ---------------------------------------------------------------------------


class AdapterError(Exception):
    """Base exception for failures raised inside a storage adapter."""

    def __init__(self, message: str, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class UnableToReadFile(AdapterError):
    pass


class UnableToWriteFile(AdapterError):
    pass


class UnableToDeleteFile(AdapterError):
    pass


class UnableToMoveFile(AdapterError):
    pass


class UnableToCopyFile(AdapterError):
    pass


class UnableToCreateDirectory(AdapterError):
    pass


class UnableToDeleteDirectory(AdapterError):
    pass


class UnableToRetrieveMetadata(AdapterError):
    pass


class UnableToListContents(AdapterError):
    pass


class UnableToCheckExistence(AdapterError):
    pass


# Anything in this tuple counts as a backend failure signal.
ADAPTER_ERRORS: tuple[type[BaseException], ...] = (AdapterError, OSError)


# ---------------------------------------------------------------------------
# Facade-level errors
# ---------------------------------------------------------------------------


class FsError(Exception):
    """Base exception for all facade errors.

    Attributes:
        path: The path the failed operation targeted, if any.
        cause: The adapter exception that triggered this error, if any.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.cause = cause


class ListFailed(FsError):
    """Raised when enumerating a directory fails."""


class MetadataUnavailable(FsError):
    """Raised when size or modification time cannot be retrieved."""


class WriteFailed(FsError):
    """Raised when writing a file fails."""


class ReadFailed(FsError):
    """Raised when reading a file fails."""


class MoveFailed(FsError):
    """Raised when renaming a file fails."""


class CopyFailed(FsError):
    """Raised when copying a file fails."""


class DirectoryCreateFailed(FsError):
    """Raised when creating a directory fails."""


class DirectoryDeleteFailed(FsError):
    """Raised when deleting a directory fails."""


class ExistenceCheckFailed(FsError):
    """Raised when the backend cannot answer whether a path exists."""


class ObjectNotFound(FsError):
    """Raised when a directory rename targets nothing at all."""


class InvalidPath(FsError):
    """Raised when a path cannot be normalized (traversal, control chars)."""


class AdapterUnavailable(FsError):
    """Raised when the storage adapter cannot be constructed."""


class DirectoryRenameIncomplete(MoveFailed):
    """Raised when some files of a directory rename could not be moved.

    Files listed in ``moved`` are already at their new location; files in
    ``failed`` are still under the old path. Nothing is rolled back.
    """

    def __init__(
        self,
        message: str,
        path: str,
        moved: list[str],
        failed: list[str],
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message, path, cause)
        self.moved = moved
        self.failed = failed


@contextmanager
def translate_errors(
    error: type[FsError], path: str, message: str | None = None
) -> Iterator[None]:
    """Re-raise adapter failures inside the block as ``error``.

    Args:
        error: Facade error class to raise.
        path: Path the operation targeted.
        message: Error message. Defaults to the adapter's own message.

    Example::

        with translate_errors(ReadFailed, path):
            return self.adapter.read(path)
    """
    try:
        yield
    except ADAPTER_ERRORS as exc:
        raise error(message or str(exc) or repr(exc), path, exc) from exc
