"""Template Engine: the directive resolution pipeline.

The TemplateEngine runs a template string through a fixed 7-step
transformation pipeline. Every step is one global scan over the current
string; text a step produces is only seen by the steps after it.

Transformation Pipeline (7 steps):
1. COMMENTS     - /* ... */ removed
2. MIXINS       - {#mixin name} inlined from context["mixins"]
3. VARIABLES    - { dotted.path } substituted
4. CONDITIONALS - {#if cond}...{#else}...{/if} resolved
5. LOOPS        - {#forEach x in items}, {#forOf x in obj} expanded
6. RANGES       - {#arr items i=0<length i++} expanded
7. WHITESPACE   - all whitespace removed when strip_whitespace is set

Context:
- Merged by the caller (see ``stromme.core.context.merge_context``)
- Read-only for the engine
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from stromme.core.options import RenderOptions
from stromme.core.report import RenderReport

from .transformers.base import TransformContext, TransformerPipeline
from .transformers.comments import CommentStripper
from .transformers.conditionals import ConditionalTransformer
from .transformers.loops import LoopExpander
from .transformers.mixins import MixinTransformer
from .transformers.ranges import RangeLoopTransformer
from .transformers.variables import VariableTransformer
from .transformers.whitespace import WhitespaceStripper


class TemplateEngine:
    """7-step directive resolution engine.

    Usage:
        engine = TemplateEngine()
        result, report = engine.process(content, data={"a": {"b": 7}})
    """

    def __init__(self) -> None:
        # Transformers are stateless; one pipeline serves every call.
        self.pipeline = self._build_pipeline()

    def _build_pipeline(self) -> TransformerPipeline:
        """Build the 7-step transformation pipeline.

        Returns:
            TransformerPipeline with all transformers
        """
        return TransformerPipeline([
            # Step 1: Comments
            CommentStripper(),
            # Step 2: Mixins
            MixinTransformer(),
            # Step 3: Variables
            VariableTransformer(),
            # Step 4: Conditionals
            ConditionalTransformer(),
            # Step 5: Collection loops (forEach, then forOf)
            LoopExpander(),
            # Step 6: Indexed range loops
            RangeLoopTransformer(),
            # Step 7: Whitespace
            WhitespaceStripper(),
        ])

    def process(
        self,
        content: str,
        data: Optional[Mapping[str, Any]] = None,
        options: Optional[RenderOptions] = None,
    ) -> tuple[str, RenderReport]:
        """Process content through the transformation pipeline.

        Args:
            content: Template string (boundary markers are left untouched)
            data: Merged context to resolve against
            options: Render options (defaults to ``RenderOptions()``)

        Returns:
            Tuple of (resolved content, report)

        Raises:
            TemplateReferenceError: If a variable, loop source or mixin
                cannot be resolved
        """
        context = TransformContext(
            data=data if data is not None else {},
            options=options or RenderOptions(),
            report=RenderReport(),
        )
        result = self.pipeline.execute(content, context)
        return result, context.report
