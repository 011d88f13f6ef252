"""Shared fixtures and fake adapters for facadefs tests."""

from __future__ import annotations

from typing import Any

import pytest

from facadefs import AdapterFilesystem, MemoryAdapter, MemoryFilesystem


class RecordingAdapter(MemoryAdapter):
    """MemoryAdapter that records every primitive call made to it."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def __getattribute__(self, name: str) -> Any:
        attr = super().__getattribute__(name)
        if name.startswith("_") or name in ("calls", "files", "dirs", "names") or not callable(attr):
            return attr

        calls = super().__getattribute__("calls")

        def recorded(*args: Any) -> Any:
            calls.append((name, args))
            return attr(*args)

        return recorded

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]


class FailingAdapter(MemoryAdapter):
    """MemoryAdapter that raises a given exception for selected calls.

    ``failures`` maps a method name to ``(paths, exception)``; the exception
    is raised when the method's first argument is in ``paths`` (or for every
    call when ``paths`` is None).
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.failures: dict[str, tuple[set[str] | None, BaseException]] = {}

    def fail(self, method: str, exc: BaseException, paths: set[str] | None = None) -> None:
        self.failures[method] = (paths, exc)

    def __getattribute__(self, name: str) -> Any:
        attr = super().__getattribute__(name)
        if name.startswith("_") or name in ("failures", "fail") or not callable(attr):
            return attr

        failures = super().__getattribute__("failures")
        if name not in failures:
            return attr

        paths, exc = failures[name]

        def failing(*args: Any) -> Any:
            if paths is None or (args and args[0] in paths):
                raise exc
            return attr(*args)

        return failing


@pytest.fixture
def fs():
    """Facade over a flat (object-store style) in-memory adapter."""
    return MemoryFilesystem()


@pytest.fixture
def real_fs():
    """Facade over an in-memory adapter with real directories."""
    return MemoryFilesystem(real_directories=True, folders_have_trailing_slashes=False)


@pytest.fixture
def recording():
    adapter = RecordingAdapter()
    return adapter, AdapterFilesystem(lambda: adapter)


@pytest.fixture
def failing():
    adapter = FailingAdapter()
    return adapter, AdapterFilesystem(lambda: adapter)
