"""Dot-path reference resolution and value textification.

``find_ref`` is the single lookup primitive used by every directive:

    find_ref("user.address.city", {"user": {"address": {"city": "Oslo"}}})
    -> "Oslo"

Segments index mappings by key, sequences by non-negative integer position
and plain objects by public attribute. A missing segment is a template authoring error and
raises :class:`TemplateReferenceError` unless a ``default`` is supplied.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from stromme.core.exceptions import TemplateReferenceError

_MISSING = object()

_SCALARS = (str, bytes, int, float, bool)


def _step(current: Any, segment: str) -> Any:
    if isinstance(current, Mapping):
        return current[segment]
    if isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
        index = int(segment)
        if index < 0:
            raise IndexError(f"negative index {index}")
        return current[index]
    if current is None or isinstance(current, _SCALARS):
        raise TypeError(f"{type(current).__name__} value is not indexable")
    if segment.startswith("_"):
        raise AttributeError(f"private attribute '{segment}' is not reachable")
    return getattr(current, segment)


def find_ref(path: str, obj: Any, default: Any = _MISSING) -> Any:
    """Resolve a dot-separated ``path`` against ``obj``.

    Args:
        path: Reference like ``"a"`` or ``"a.b.0.c"``
        obj: Mapping, sequence or object to search
        default: Returned instead of raising when a segment is missing

    Returns:
        The referenced value

    Raises:
        TemplateReferenceError: If a segment is missing or not indexable and
            no default was given
    """
    current = obj
    walked: list[str] = []
    for segment in path.split("."):
        try:
            if not segment:
                raise KeyError(segment)
            current = _step(current, segment)
        except (KeyError, IndexError, ValueError, TypeError, AttributeError) as exc:
            if default is not _MISSING:
                return default
            raise TemplateReferenceError(
                f"Cannot resolve '{path}': segment '{segment}' not found",
                context={"path": path, "segment": segment, "resolved": ".".join(walked)},
            ) from exc
        walked.append(segment)
    return current


def textify(value: Any) -> str:
    """Convert a resolved value into template output text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, Sequence) and not isinstance(value, bytes):
        return ",".join(textify(item) for item in value)
    return str(value)


__all__ = ["find_ref", "textify"]
