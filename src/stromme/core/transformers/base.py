"""Base classes for content transformers in the TemplateEngine.

The TemplateEngine uses a pipeline of transformers to process templates.
Each transformer handles one directive kind and runs exactly once per
instantiation, over the whole current string.

Transformation Order (7 steps):
1. COMMENTS     - /* ... */
2. MIXINS       - {#mixin name}
3. VARIABLES    - { dotted.path }
4. CONDITIONALS - {#if cond}...{#else}...{/if}
5. LOOPS        - {#forEach x in items}...{/forEach}, {#forOf x in obj}...{/forOf}
6. RANGES       - {#arr items i=0<length i++}...{/arr}
7. WHITESPACE   - optional removal of all whitespace
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, Iterator, List, Mapping, Optional, TypeVar

from stromme.core.options import RenderOptions
from stromme.core.report import RenderReport

from .references import find_ref

logger = logging.getLogger(__name__)


@dataclass
class TransformContext:
    """Context provided to transformers during processing.

    Contains all information needed for one instantiation:
    - Merged data (defaults + call data + query)
    - Render options
    - Report collecting what was resolved
    """

    data: Mapping[str, Any] = field(default_factory=dict)
    options: RenderOptions = field(default_factory=RenderOptions)
    report: RenderReport = field(default_factory=RenderReport)

    def lookup(self, path: str) -> Any:
        """Resolve a dotted path against the data, raising when missing."""
        return find_ref(path, self.data)


@dataclass(frozen=True)
class Directive:
    """A directive span found by a scanner.

    ``start``/``end`` index into the buffer that was scanned; ``text`` is the
    verbatim span, kept so unresolvable directives can pass through.
    """

    start: int
    end: int
    text: str


D = TypeVar("D", bound=Directive)


class ContentTransformer(ABC):
    """Abstract base class for content transformers.

    Transformers are stateless and receive context through transform().
    """

    @abstractmethod
    def transform(self, content: str, context: TransformContext) -> str:
        """Transform content using this transformer's rules.

        Args:
            content: Input content to transform
            context: TransformContext with data, options and report

        Returns:
            Transformed content
        """
        ...

    def get_name(self) -> str:
        """Get transformer name for logging/debugging."""
        return self.__class__.__name__


class ScanningTransformer(ContentTransformer, Generic[D]):
    """Transformer built from a scanner and a resolver.

    ``scan`` yields non-overlapping directive records over the input buffer,
    ``resolve`` maps each record to its replacement text. Returning ``None``
    from ``resolve`` leaves the directive verbatim. Replacements are spliced
    into a new buffer, so text produced here is never re-scanned by the same
    transformer.
    """

    @abstractmethod
    def scan(self, content: str) -> Iterator[D]:
        """Yield directive records found in ``content``, left to right."""
        ...

    @abstractmethod
    def resolve(self, directive: D, context: TransformContext) -> Optional[str]:
        """Return replacement text for ``directive`` or None to keep it."""
        ...

    def transform(self, content: str, context: TransformContext) -> str:
        parts: List[str] = []
        pos = 0
        for directive in self.scan(content):
            replacement = self.resolve(directive, context)
            if replacement is None:
                continue
            parts.append(content[pos:directive.start])
            parts.append(replacement)
            pos = directive.end
        if not parts:
            return content
        parts.append(content[pos:])
        return "".join(parts)


class TransformerPipeline:
    """Execute a sequence of transformers on content.

    Example:
        pipeline = TransformerPipeline([
            CommentStripper(),
            VariableTransformer(),
        ])
        result = pipeline.execute(content, context)
    """

    def __init__(self, transformers: List[ContentTransformer]) -> None:
        """Initialize with ordered list of transformers.

        Args:
            transformers: List of transformers to execute in order
        """
        self.transformers = transformers

    def execute(self, content: str, context: TransformContext) -> str:
        """Execute all transformers in sequence.

        Args:
            content: Input content
            context: TransformContext for the pipeline

        Returns:
            Fully transformed content
        """
        result = content
        for transformer in self.transformers:
            logger.debug("running %s", transformer.get_name())
            result = transformer.transform(result, context)
        return result

    def add_transformer(self, transformer: ContentTransformer) -> None:
        """Add a transformer to the end of the pipeline."""
        self.transformers.append(transformer)

    def insert_transformer(self, index: int, transformer: ContentTransformer) -> None:
        """Insert a transformer at a specific position."""
        self.transformers.insert(index, transformer)
