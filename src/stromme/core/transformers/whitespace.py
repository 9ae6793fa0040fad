"""Optional final pass removing all whitespace."""
from __future__ import annotations

import re

from .base import ContentTransformer, TransformContext


class WhitespaceStripper(ContentTransformer):
    """Remove every whitespace character when ``strip_whitespace`` is set."""

    WHITESPACE_PATTERN = re.compile(r"\s+")

    def transform(self, content: str, context: TransformContext) -> str:
        if not context.options.strip_whitespace:
            return content
        context.report.whitespace_stripped = True
        return self.WHITESPACE_PATTERN.sub("", content)
