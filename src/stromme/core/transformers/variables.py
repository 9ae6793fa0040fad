"""Variable transformer for template composition.

Handles ``{ dotted.path }`` references against the merged context:

    Context: {"user": {"name": "Ada"}, "query": {"page": "2"}}
    Template: Hello { user.name }, page {query.page}
    Output: Hello Ada, page 2

A reference may not start with ``#``, ``/`` or ``-`` (those open block
directives and loop placeholders) and may not contain whitespace or braces.
Missing references raise :class:`TemplateReferenceError`.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

from .base import Directive, ScanningTransformer, TransformContext
from .references import textify


@dataclass(frozen=True)
class VariableReference(Directive):
    path: str


class VariableTransformer(ScanningTransformer[VariableReference]):
    """Substitute every ``{ path }`` with the textified resolved value."""

    VARIABLE_PATTERN = re.compile(r"\{\s?(?P<path>[^-#/{}\s][^{}\s]*)\s?\}")

    def scan(self, content: str) -> Iterator[VariableReference]:
        for match in self.VARIABLE_PATTERN.finditer(content):
            yield VariableReference(
                start=match.start(),
                end=match.end(),
                text=match.group(0),
                path=match.group("path"),
            )

    def resolve(self, directive: VariableReference, context: TransformContext) -> str:
        value = context.lookup(directive.path)
        context.report.variables_substituted.add(directive.path)
        return textify(value)
