"""Canonicalization of raw parser attributes before they become ID fields.

Trivial variations (case and separators in package names, slashes in paths,
whitespace in names and types) must not change an identifier, otherwise
re-ingesting the same source would mint a different key.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from identity.config import DEFAULT_TYPE_NAME

_WHITESPACE_RE = re.compile(r"\s+")
_PACKAGE_SEPARATOR_RE = re.compile(r"[\s\\]+")
_REPEATED_DOTS_RE = re.compile(r"\.+")
_EDGE_DOT_RE = re.compile(r"^\.|\.$")
_REPEATED_SLASHES_RE = re.compile(r"/+")
_EDGE_SLASH_RE = re.compile(r"^/|/$")
_GENERIC_ARGS_RE = re.compile(r"<[^>]*>")


def normalize_package_name(package_name: Optional[str]) -> str:
    """Normalize a package name for consistent ID generation.

    Args:
        package_name: Raw package name, possibly ``None`` for the default
            package.

    Returns:
        Lowercased, dot-separated package name, or ``""`` for the default
        package.
    """
    if package_name is None or not package_name.strip():
        return ""
    normalized = package_name.strip().lower()
    normalized = _PACKAGE_SEPARATOR_RE.sub(".", normalized)
    normalized = _REPEATED_DOTS_RE.sub(".", normalized)
    return _EDGE_DOT_RE.sub("", normalized)


def normalize_file_path(file_path: Optional[str]) -> str:
    """Normalize a file path to forward slashes without edge slashes."""
    if file_path is None or not file_path.strip():
        return ""
    normalized = file_path.strip().replace("\\", "/")
    normalized = _REPEATED_SLASHES_RE.sub("/", normalized)
    return _EDGE_SLASH_RE.sub("", normalized)


def normalize_simple_name(name: Optional[str]) -> str:
    if name is None:
        return ""
    return _WHITESPACE_RE.sub("_", name.strip())


def normalize_type_name(type_name: Optional[str]) -> str:
    """Normalize a type name; generic arguments collapse to ``<T>``."""
    if type_name is None or not type_name.strip():
        return DEFAULT_TYPE_NAME
    normalized = _WHITESPACE_RE.sub("", type_name.strip())
    return _GENERIC_ARGS_RE.sub("<T>", normalized)


def normalize_parameter_list(parameter_types: Optional[Iterable[Optional[str]]]) -> str:
    """Render parameter types as the canonical ``(T1,T2,...)`` string."""
    if not parameter_types:
        return "()"
    return "(" + ",".join(normalize_type_name(t) for t in parameter_types) + ")"


def normalize_method_signature(
    method_name: Optional[str],
    parameter_types: Optional[Iterable[Optional[str]]],
) -> str:
    """Normalize a method signature, e.g. ``update(String,List<T>)``."""
    return normalize_simple_name(method_name) + normalize_parameter_list(parameter_types)
