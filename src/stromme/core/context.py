"""Context merging for template instantiation.

The merged context is always a new dict; caller data is never written to.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import parse_qsl

QUERY_KEY = "query"

QueryLike = Union[str, Mapping[str, Any], Iterable[Tuple[str, Any]], None]


def build_query(query: QueryLike) -> Dict[str, Any]:
    """Flatten query parameters into a plain dict.

    Accepts a raw query string (``"a=1&b=2"``, leading ``?`` allowed), a
    mapping, or an iterable of ``(key, value)`` pairs. For repeated keys the
    last value wins.
    """
    if query is None:
        return {}
    if isinstance(query, str):
        return dict(parse_qsl(query.lstrip("?"), keep_blank_values=True))
    if isinstance(query, Mapping):
        return dict(query.items())
    return {key: value for key, value in query}


def merge_context(
    defaults: Optional[Mapping[str, Any]] = None,
    data: Optional[Mapping[str, Any]] = None,
    query: QueryLike = None,
) -> Dict[str, Any]:
    """Merge constructor defaults, call data and query parameters.

    Call data wins over defaults on key collisions; the ``query`` key is
    always set from ``query`` last.
    """
    merged: Dict[str, Any] = {**(defaults or {}), **(data or {})}
    merged[QUERY_KEY] = build_query(query)
    return merged


__all__ = ["QUERY_KEY", "QueryLike", "build_query", "merge_context"]
