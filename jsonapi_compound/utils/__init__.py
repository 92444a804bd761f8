"""Utilities for addressing JSON:API documents."""

from .pointer import MISSING, has_path, join_path, key_from_path, path_from_key, resolve_path

__all__ = [
    "MISSING",
    "has_path",
    "join_path",
    "key_from_path",
    "path_from_key",
    "resolve_path",
]
