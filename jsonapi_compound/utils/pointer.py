"""JSON pointer helpers for addressing members of decoded documents."""

from __future__ import annotations

from typing import Any, Iterable


class _Missing:
    """Sentinel type for members that are absent from a document."""

    _instance: "_Missing | None" = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def _escape(segment: str) -> str:
    return segment.replace("~", "~0").replace("/", "~1")


def key_from_path(path: str) -> tuple[str, ...]:
    """Split a pointer such as ``/data/attributes`` into its member names.

    Both ``""`` and ``"/"`` address the document root. Any other empty
    segment, such as the last one in ``/data/``, is an empty member name.
    """
    if path in ("", "/"):
        return ()
    if path.startswith("/"):
        path = path[1:]
    return tuple(_unescape(segment) for segment in path.split("/"))


def path_from_key(*parts: str | int) -> str:
    """Build a pointer from member names and list indexes."""
    if not parts:
        return "/"
    return "/" + "/".join(_escape(str(part)) for part in parts)


def join_path(path: str, *members: str | int) -> str:
    """Append members to an existing pointer."""
    return path_from_key(*key_from_path(path), *members)


def _step(node: Any, segment: str) -> Any:
    if isinstance(node, dict):
        return node.get(segment, MISSING)
    if isinstance(node, list):
        if not segment.isdigit():
            return MISSING
        index = int(segment)
        return node[index] if index < len(node) else MISSING
    return MISSING


def resolve_path(document: Any, path: str | Iterable[str]) -> Any:
    """Return the value at ``path`` or ``MISSING`` when any member is absent.

    A JSON ``null`` resolves to ``None`` so it stays distinguishable from an
    absent member.
    """
    segments = key_from_path(path) if isinstance(path, str) else tuple(path)
    node = document
    for segment in segments:
        node = _step(node, segment)
        if node is MISSING:
            return MISSING
    return node


def has_path(document: Any, path: str) -> bool:
    """Return True if every member along ``path`` is present."""
    return resolve_path(document, path) is not MISSING
