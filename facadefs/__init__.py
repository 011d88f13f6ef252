"""facadefs: Directory semantics and uniform errors over pluggable storage."""

from .base import (
    CONFIG_VISIBILITY,
    DirectoryAttributes,
    FileAttributes,
    Listing,
    ListingKind,
    StorageAdapter,
    Visibility,
)
from .config import FsConfig, FsSettings, LocalFsConfig, MemoryFsConfig, connect_fs, open_fs
from .errors import (
    AdapterError,
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
)
from .facade import AdapterFilesystem, Filesystem
from .local import LocalAdapter, LocalFilesystem
from .memory import MemoryAdapter, MemoryFilesystem

__all__ = [
    "AdapterError",
    "AdapterFilesystem",
    "AdapterUnavailable",
    "CONFIG_VISIBILITY",
    "connect_fs",
    "CopyFailed",
    "DirectoryAttributes",
    "DirectoryCreateFailed",
    "DirectoryDeleteFailed",
    "DirectoryRenameIncomplete",
    "ExistenceCheckFailed",
    "FileAttributes",
    "Filesystem",
    "FsConfig",
    "FsError",
    "FsSettings",
    "InvalidPath",
    "ListFailed",
    "Listing",
    "ListingKind",
    "LocalAdapter",
    "LocalFilesystem",
    "LocalFsConfig",
    "MemoryAdapter",
    "MemoryFilesystem",
    "MemoryFsConfig",
    "MetadataUnavailable",
    "MoveFailed",
    "ObjectNotFound",
    "open_fs",
    "ReadFailed",
    "StorageAdapter",
    "Visibility",
    "WriteFailed",
]
