"""Configuration for filesystem facades.

Provides configuration dataclasses and the connect_fs/open_fs factory
functions for configuring a facade over one of the bundled adapters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from .facade import Filesystem


@dataclass(frozen=True)
class FsSettings:
    """Settings fixed for the lifetime of one facade instance.

    Attributes:
        has_urls: Whether files are exposed through browsable URLs. Written
            objects are public when True, private otherwise.
        folders_have_trailing_slashes: Whether the backend stores directory
            keys with a trailing slash ("media/" rather than "media").
    """

    has_urls: bool = False
    folders_have_trailing_slashes: bool = True


@dataclass
class MemoryFsConfig:
    """Configuration for an in-memory backend.

    Attributes:
        type: Always "memory".
        real_directories: Whether the backend keeps real directory objects
            (True) or behaves like a flat object store (False).
        settings: Facade settings.
    """

    type: Literal["memory"] = "memory"
    real_directories: bool = False
    settings: FsSettings = field(default_factory=FsSettings)


@dataclass
class LocalFsConfig:
    """Configuration for a local disk backend.

    Attributes:
        type: Always "local".
        root: Directory all files are stored under (created if missing).
        settings: Facade settings. Local directories have no trailing slash.
    """

    type: Literal["local"] = "local"
    root: str = ""
    settings: FsSettings = field(
        default_factory=lambda: FsSettings(folders_have_trailing_slashes=False)
    )


# Type alias for all filesystem configs
FsConfig = MemoryFsConfig | LocalFsConfig


def connect_fs(
    type: Literal["memory", "local"] = "memory",
    **kwargs,
) -> FsConfig:
    """Configure a filesystem facade.

    Args:
        type: Backend type.
            - "memory": In-memory key space, flat unless real_directories=True.
            - "local": Directory on the local disk. Requires 'root'.
        **kwargs: Additional configuration.
            For every type:
                - has_urls (bool): Optional. Publish written objects.
                - folders_have_trailing_slashes (bool): Optional. Directory
                  key convention of the backend.
            For type="memory":
                - real_directories (bool): Optional (default: False).
            For type="local":
                - root (str): Required. Directory to store files under.

    Returns:
        FsConfig for open_fs().

    Examples:
        >>> connect_fs(type="memory", has_urls=True)
        MemoryFsConfig(type='memory', real_directories=False, settings=FsSettings(has_urls=True, folders_have_trailing_slashes=True))

        >>> connect_fs(type="local", root="/srv/uploads").settings
        FsSettings(has_urls=False, folders_have_trailing_slashes=False)
    """
    if type == "memory":
        real_directories = kwargs.pop("real_directories", False)
        settings = _pop_settings(kwargs, folders_have_trailing_slashes=True)
        if kwargs:
            raise ValueError(
                f"Unexpected arguments for memory fs: {list(kwargs.keys())}"
            )
        return MemoryFsConfig(real_directories=real_directories, settings=settings)

    elif type == "local":
        root = kwargs.pop("root", "")
        settings = _pop_settings(kwargs, folders_have_trailing_slashes=False)

        if kwargs:
            raise ValueError(
                f"Unexpected arguments for local fs: {list(kwargs.keys())}"
            )

        if not root:
            raise ValueError("Local filesystem requires 'root' parameter")

        return LocalFsConfig(root=root, settings=settings)

    else:
        raise ValueError(
            f"Unsupported filesystem type: {type}. Use 'memory' or 'local'."
        )


def open_fs(config: FsConfig) -> Filesystem:
    """Build the facade described by a config."""
    if isinstance(config, MemoryFsConfig):
        from .memory import MemoryFilesystem

        return MemoryFilesystem(
            real_directories=config.real_directories,
            has_urls=config.settings.has_urls,
            folders_have_trailing_slashes=config.settings.folders_have_trailing_slashes,
        )

    if isinstance(config, LocalFsConfig):
        from .local import LocalFilesystem

        return LocalFilesystem(
            config.root,
            has_urls=config.settings.has_urls,
            folders_have_trailing_slashes=config.settings.folders_have_trailing_slashes,
        )

    raise ValueError(f"Unsupported filesystem config: {config!r}")


def _pop_settings(kwargs: dict, folders_have_trailing_slashes: bool) -> FsSettings:
    return FsSettings(
        has_urls=kwargs.pop("has_urls", False),
        folders_have_trailing_slashes=kwargs.pop(
            "folders_have_trailing_slashes", folders_have_trailing_slashes
        ),
    )
