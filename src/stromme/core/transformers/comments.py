"""Block comment stripping.

Removes ``/* ... */`` spans before any directive is resolved, so commented
out directives never reach later passes.
"""
from __future__ import annotations

import re

from .base import ContentTransformer, TransformContext


class CommentStripper(ContentTransformer):
    """Delete every ``/* ... */`` block comment (non-greedy, multi-line)."""

    COMMENT_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)

    def transform(self, content: str, context: TransformContext) -> str:
        result, count = self.COMMENT_PATTERN.subn("", content)
        context.report.comments_stripped += count
        return result
