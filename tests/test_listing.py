"""Tests for Filesystem.list_entries() and the Listing record."""

import pytest

from facadefs import (
    DirectoryAttributes,
    FileAttributes,
    ListFailed,
    Listing,
    ListingKind,
    MemoryFilesystem,
)
from facadefs.errors import UnableToListContents


def as_set(entries):
    return {
        (e.dirname, e.basename, e.type, e.file_size, e.date_modified)
        for e in entries
    }


class TestListEntries:
    """Test translation of adapter listings into Listing records."""

    def test_recursive_root_listing(self):
        """Root listing yields files, inferred directories and nested files."""
        fs = MemoryFilesystem()
        fs.write("a.txt", b"hello", {"timestamp": 100})
        fs.write("sub/b.txt", b"abc", {"timestamp": 200})

        entries = list(fs.list_entries("", recursive=True))

        assert as_set(entries) == {
            ("", "a.txt", ListingKind.FILE, 5, 100),
            ("", "sub", ListingKind.DIR, None, 200),
            ("sub", "b.txt", ListingKind.FILE, 3, 200),
        }

    def test_recursive_listing_with_real_directories(self):
        """Real-directory backends report the same set of entries."""
        fs = MemoryFilesystem(real_directories=True)
        fs.write("a.txt", b"hello", {"timestamp": 100})
        fs.create_directory("sub")
        fs.write("sub/b.txt", b"abc", {"timestamp": 200})

        entries = {(e.dirname, e.basename, e.type, e.file_size) for e in fs.list_entries()}

        assert entries == {
            ("", "a.txt", ListingKind.FILE, 5),
            ("", "sub", ListingKind.DIR, None),
            ("sub", "b.txt", ListingKind.FILE, 3),
        }

    def test_non_recursive_lists_immediate_children(self):
        fs = MemoryFilesystem()
        fs.write("top.txt", b"")
        fs.write("pkg/mod.py", b"")
        fs.write("pkg/sub/deep.py", b"")

        uris = sorted(e.uri for e in fs.list_entries("", recursive=False))

        assert uris == ["pkg", "top.txt"]

    def test_listing_a_subdirectory(self):
        fs = MemoryFilesystem()
        fs.write("pkg/mod.py", b"x")
        fs.write("pkg/sub/deep.py", b"yy")
        fs.write("other/file.py", b"")

        uris = sorted(e.uri for e in fs.list_entries("pkg"))

        assert uris == ["pkg/mod.py", "pkg/sub", "pkg/sub/deep.py"]

    def test_listing_normalizes_directory(self):
        """Leading and trailing slashes on the directory are ignored."""
        fs = MemoryFilesystem()
        fs.write("pkg/mod.py", b"x")

        assert [e.uri for e in fs.list_entries("/pkg/")] == ["pkg/mod.py"]

    def test_listing_missing_directory_is_empty(self):
        fs = MemoryFilesystem()
        assert list(fs.list_entries("nope")) == []

    def test_uri_reconstructs_reported_path(self):
        """dirname + basename gives back the path the backend reported."""
        fs = MemoryFilesystem()
        paths = ["a.txt", "x/y/z.bin", "x/w.txt"]
        for path in paths:
            fs.write(path, b"data")

        files = [e.uri for e in fs.list_entries() if not e.is_dir]

        assert sorted(files) == sorted(paths)

    def test_directories_have_no_size(self):
        fs = MemoryFilesystem()
        fs.write("a/b/c.txt", b"data")

        for entry in fs.list_entries():
            if entry.is_dir:
                assert entry.file_size is None
            else:
                assert entry.file_size == 4

    def test_listing_is_lazy(self, recording):
        """The adapter is not consulted until iteration starts."""
        adapter, fs = recording
        fs.write("a.txt", b"x")
        adapter.calls.clear()

        entries = fs.list_entries("")
        assert "list_contents" not in adapter.names()

        next(entries)
        assert "list_contents" in adapter.names()


class TestListingErrors:
    def test_enumeration_failure_raises_list_failed(self, failing):
        adapter, fs = failing
        cause = UnableToListContents("bucket unreachable")
        adapter.fail("list_contents", cause)

        with pytest.raises(ListFailed) as exc_info:
            list(fs.list_entries("media"))

        assert exc_info.value.path == "media"
        assert exc_info.value.cause is cause
        assert "Unable to list files in media" in str(exc_info.value)

    def test_failure_mid_iteration_raises_list_failed(self):
        """Errors raised while the adapter is yielding are mapped too."""

        class BrokenListing(MemoryFilesystem):
            def create_adapter(self):
                adapter = super().create_adapter()

                def list_contents(path, deep):
                    yield FileAttributes("a.txt", 1, 1)
                    raise ConnectionResetError("connection dropped")

                adapter.list_contents = list_contents
                return adapter

        entries = BrokenListing().list_entries()

        assert next(entries).basename == "a.txt"
        with pytest.raises(ListFailed) as exc_info:
            next(entries)
        assert isinstance(exc_info.value.cause, ConnectionResetError)

    def test_root_listing_failure_message(self, failing):
        adapter, fs = failing
        adapter.fail("list_contents", OSError("boom"))

        with pytest.raises(ListFailed, match="^Unable to list files$"):
            list(fs.list_entries())


class TestListingRecord:
    def test_from_file_attributes(self):
        listing = Listing.from_attributes(FileAttributes("docs/readme.md", 42, 10))

        assert listing == Listing("docs", "readme.md", ListingKind.FILE, 42, 10)
        assert listing.uri == "docs/readme.md"
        assert listing.is_dir is False

    def test_from_directory_attributes_strips_trailing_slash(self):
        listing = Listing.from_attributes(DirectoryAttributes("docs/img/", 7))

        assert listing.dirname == "docs"
        assert listing.basename == "img"
        assert listing.is_dir is True
        assert listing.file_size is None

    def test_top_level_entry_has_empty_dirname(self):
        listing = Listing.from_attributes(FileAttributes("a.txt", 0, 1))
        assert listing.dirname == ""
        assert listing.uri == "a.txt"

    def test_directory_with_size_is_rejected(self):
        with pytest.raises(ValueError):
            Listing("", "sub", ListingKind.DIR, 0, 12)
