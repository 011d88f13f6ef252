"""Path helpers shared by the facade and the bundled adapters."""

from __future__ import annotations

from .errors import InvalidPath


def normalize_path(path: str) -> str:
    """Normalize a path into a backend key.

    Converts backslashes, drops empty and ``.`` segments, resolves ``..`` and
    strips leading/trailing slashes. The root is the empty string.

    Args:
        path: Path as supplied by a caller (e.g. "/media//./img/").

    Returns:
        Normalized key (e.g. "media/img").

    Raises:
        InvalidPath: If the path climbs above the root or holds control
            characters.
    """
    if any(ord(char) < 32 or ord(char) == 127 for char in path):
        raise InvalidPath(f"Control characters are not allowed in “{path!r}”", path)

    parts: list[str] = []
    for segment in path.replace("\\", "/").split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not parts:
                raise InvalidPath(f"Path traversal detected: “{path}”", path)
            parts.pop()
        else:
            parts.append(segment)
    return "/".join(parts)


def directory_key(path: str, trailing_slash: bool) -> str:
    """Key under which a backend stores a directory.

    Trailing slashes are trimmed, then exactly one is re-appended if the
    backend's folders carry one.
    """
    return path.rstrip("/") + ("/" if trailing_slash else "")


def sibling_path(path: str, name: str) -> str:
    """Replace the last segment of ``path`` with ``name``.

    >>> sibling_path("media/2024/img", "photos")
    'media/2024/photos'
    >>> sibling_path("img", "photos")
    'photos'
    """
    parts = path.split("/")
    parts[-1] = name
    return "/".join(parts)


def replace_prefix(key: str, old: str, new: str) -> str:
    """Substitute the leading ``old`` in ``key`` with ``new``.

    Keys that do not start with ``old`` are returned unchanged.
    """
    if not key.startswith(old):
        return key
    return new + key[len(old):]
