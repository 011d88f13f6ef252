"""Tests for connect_fs() and open_fs()."""

import pytest

from facadefs import (
    FsSettings,
    LocalFilesystem,
    LocalFsConfig,
    MemoryFilesystem,
    MemoryFsConfig,
    connect_fs,
    open_fs,
)


class TestConnectFs:
    def test_memory_defaults(self):
        config = connect_fs()

        assert config == MemoryFsConfig()
        assert config.settings == FsSettings(has_urls=False, folders_have_trailing_slashes=True)

    def test_memory_options(self):
        config = connect_fs(type="memory", real_directories=True, has_urls=True)

        assert config.real_directories is True
        assert config.settings.has_urls is True

    def test_local_requires_root(self):
        with pytest.raises(ValueError, match="requires 'root'"):
            connect_fs(type="local")

    def test_local_defaults_to_no_trailing_slash(self):
        config = connect_fs(type="local", root="/srv/uploads")

        assert config == LocalFsConfig(root="/srv/uploads")
        assert config.settings.folders_have_trailing_slashes is False

    def test_unexpected_arguments_rejected(self):
        with pytest.raises(ValueError, match="Unexpected arguments for memory fs"):
            connect_fs(type="memory", root="/tmp")
        with pytest.raises(ValueError, match="Unexpected arguments for local fs"):
            connect_fs(type="local", root="/tmp", real_directories=True)

    def test_unsupported_type(self):
        with pytest.raises(ValueError, match="Unsupported filesystem type"):
            connect_fs(type="ftp")


class TestOpenFs:
    def test_open_memory(self):
        fs = open_fs(connect_fs(type="memory", real_directories=True, has_urls=True))

        assert isinstance(fs, MemoryFilesystem)
        assert fs.real_directories is True
        assert fs.has_urls is True

    def test_open_local(self, tmp_path):
        fs = open_fs(connect_fs(type="local", root=str(tmp_path / "store")))

        assert isinstance(fs, LocalFilesystem)
        fs.write("a.txt", b"hello")
        assert (tmp_path / "store" / "a.txt").read_bytes() == b"hello"

    def test_open_unknown_config(self):
        with pytest.raises(ValueError):
            open_fs(object())
