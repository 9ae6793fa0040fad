"""Loop transformer for template composition.

Handles collection loops:
- {#forEach item in items}...{/forEach} - Iterate over a sequence
- {#forOf item in object}...{/forOf}   - Iterate over a mapping's values
- {- item -}                            - Current element
- {- item.field.path -}                 - Field of the current element

Both spellings share one expansion: mappings yield their values in insertion
order, other iterables yield their items. Loops do not nest and expose no
per-element index.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterator, List, Pattern

from .base import ContentTransformer, Directive, ScanningTransformer, TransformContext
from .references import find_ref, textify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionLoop(Directive):
    keyword: str
    variable: str
    source: str
    body: str


def iter_elements(source: Any) -> List[Any]:
    """Return the elements a collection loop visits for ``source``."""
    if isinstance(source, Mapping):
        return list(source.values())
    if isinstance(source, Iterable):
        return list(source)
    return []


@lru_cache(maxsize=128)
def placeholder_pattern(variable: str) -> Pattern[str]:
    """Pattern for ``{- variable -}`` and ``{- variable.field -}`` placeholders."""
    return re.compile(
        r"\{-\s?" + re.escape(variable) + r"(?:\.(?P<field>[^\s{}]+?))?\s?-\}"
    )


class CollectionLoopTransformer(ScanningTransformer[CollectionLoop]):
    """Expand one loop spelling (``forEach`` or ``forOf``) in a single scan."""

    def __init__(self, keyword: str) -> None:
        self.keyword = keyword
        self.pattern = re.compile(
            r"\{\s?#" + keyword + r"\s+(?P<variable>\S+?)\s+in\s+(?P<source>[^\s}]+)\s?\}"
            r"(?P<body>.*?)"
            r"\{\s?/" + keyword + r"\s?\}",
            re.DOTALL | re.IGNORECASE,
        )

    def scan(self, content: str) -> Iterator[CollectionLoop]:
        for match in self.pattern.finditer(content):
            yield CollectionLoop(
                start=match.start(),
                end=match.end(),
                text=match.group(0),
                keyword=self.keyword,
                variable=match.group("variable"),
                source=match.group("source"),
                body=match.group("body"),
            )

    def resolve(self, directive: CollectionLoop, context: TransformContext) -> str:
        elements = iter_elements(context.lookup(directive.source))
        pattern = placeholder_pattern(directive.variable)

        results: List[str] = []
        for element in elements:
            results.append(pattern.sub(lambda m: _render_placeholder(m, element), directive.body))

        context.report.loops_expanded += 1
        logger.debug(
            "expanded %s over %s (%d elements)", directive.keyword, directive.source, len(elements)
        )
        return "".join(results)


def _render_placeholder(match: re.Match[str], element: Any) -> str:
    field = match.group("field")
    if field is None:
        return textify(element)
    return textify(find_ref(field, element))


class LoopExpander(ContentTransformer):
    """Combined transformer for both collection loop spellings.

    Processes in order:
    1. {#forEach x in items}...{/forEach}
    2. {#forOf x in object}...{/forOf}

    Example:
        Context: {"items": [{"n": "a"}, {"n": "b"}]}
        Template: {#forEach x in items}<li>{- x.n -}</li>{/forEach}
        Output: <li>a</li><li>b</li>
    """

    def __init__(self) -> None:
        self.for_each_transformer = CollectionLoopTransformer("forEach")
        self.for_of_transformer = CollectionLoopTransformer("forOf")

    def transform(self, content: str, context: TransformContext) -> str:
        content = self.for_each_transformer.transform(content, context)
        content = self.for_of_transformer.transform(content, context)
        return content
