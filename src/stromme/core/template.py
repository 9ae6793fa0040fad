"""Template handles and the Strømme entry point.

Usage:
    stromme = Stromme({"site": "Røut"})
    footer = stromme.template("<footer>{ site }</footer>")
    page = stromme.template("<h1>{ title }</h1>{#mixin footer}")

    html = page.instantiate("tab=home", {"title": "Hi", "mixins": {"footer": footer}})
    fragment = stromme.render(html)
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from stromme.core.context import QueryLike, merge_context
from stromme.core.document import DocumentParser, HtmlFragmentParser, TemplateFragment
from stromme.core.engine import TemplateEngine
from stromme.core.options import OptionsLike, RenderOptions, coerce_options
from stromme.core.report import RenderReport

logger = logging.getLogger(__name__)

TEMPLATE_OPEN = "<template>"
TEMPLATE_CLOSE = "</template>"

_MARKER_RE = re.compile(r"<template>|</template>", re.IGNORECASE)
_WRAPPED_RE = re.compile(r"^\s*<template>.*</template>\s*$", re.DOTALL | re.IGNORECASE)


def wrap_markers(raw: str) -> str:
    """Wrap ``raw`` in template boundary markers unless already wrapped."""
    if _WRAPPED_RE.match(raw):
        return raw
    return f"{TEMPLATE_OPEN}{raw}{TEMPLATE_CLOSE}"


def strip_markers(text: str) -> str:
    """Remove every template boundary marker from ``text``."""
    return _MARKER_RE.sub("", text)


@dataclass(frozen=True)
class TemplateHandle:
    """Immutable (source, wrapped) template pair bound to its engine."""

    source: str
    wrapped: str
    owner: "Stromme" = field(repr=False, compare=False)

    def compile_to_mixin(self) -> str:
        """Return the template body without boundary markers, unresolved."""
        return strip_markers(self.wrapped)

    def instantiate(
        self,
        query: QueryLike = None,
        data: Optional[Mapping[str, Any]] = None,
        options: OptionsLike = None,
    ) -> str:
        """Resolve every directive and return the marker-free result.

        Args:
            query: Query parameters, stored under the ``query`` key
            data: Call data, overriding the constructor defaults
            options: ``RenderOptions`` or a mapping like ``{"stripWhitespace": True}``

        Raises:
            TemplateReferenceError: If a reference or mixin cannot be resolved
            OptionsError: If ``options`` are invalid
        """
        result, _ = self.owner._instantiate(self, query, data, options)
        return result

    def instantiate_with_report(
        self,
        query: QueryLike = None,
        data: Optional[Mapping[str, Any]] = None,
        options: OptionsLike = None,
    ) -> tuple[str, RenderReport]:
        """Like :meth:`instantiate`, also returning the :class:`RenderReport`."""
        return self.owner._instantiate(self, query, data, options)


class Stromme:
    """Template factory holding default data, options and a document parser.

    Args:
        data: Default context for every instantiation; call data wins on
            key collisions
        options: Default render options (layered over the bundled defaults)
        parser: Document parser used by :meth:`render`
        engine: Directive pipeline (a fresh :class:`TemplateEngine` by default)
    """

    def __init__(
        self,
        data: Optional[Mapping[str, Any]] = None,
        *,
        options: OptionsLike = None,
        parser: Optional[DocumentParser] = None,
        engine: Optional[TemplateEngine] = None,
    ) -> None:
        self._data = dict(data or {})
        self._options = coerce_options(options)
        self._parser: DocumentParser = parser or HtmlFragmentParser()
        self._engine = engine or TemplateEngine()

    @property
    def data(self) -> Mapping[str, Any]:
        """Read-only view of the default data."""
        return MappingProxyType(self._data)

    @property
    def options(self) -> RenderOptions:
        return self._options

    def template(self, raw: str) -> TemplateHandle:
        """Create a template handle from ``raw``."""
        return TemplateHandle(source=raw, wrapped=wrap_markers(raw), owner=self)

    def render(self, resolved: str) -> TemplateFragment:
        """Parse a resolved template string into a :class:`TemplateFragment`."""
        return self._parser.parse(wrap_markers(resolved))

    def _instantiate(
        self,
        handle: TemplateHandle,
        query: QueryLike,
        data: Optional[Mapping[str, Any]],
        options: OptionsLike,
    ) -> tuple[str, RenderReport]:
        context = merge_context(self._data, data, query)
        render_options = coerce_options(options, base=self._options)
        resolved, report = self._engine.process(handle.wrapped, context, render_options)
        logger.debug(
            "instantiated template (%d chars -> %d chars, %d warnings)",
            len(handle.source), len(resolved), len(report.warnings),
        )
        return strip_markers(resolved), report


__all__ = [
    "TEMPLATE_OPEN",
    "TEMPLATE_CLOSE",
    "Stromme",
    "TemplateHandle",
    "strip_markers",
    "wrap_markers",
]
