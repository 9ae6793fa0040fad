"""Template transformers for the Strømme engine.

Each transformer handles one directive kind:

- base: Abstract base classes, directive records and pipeline infrastructure
- references: Dot-path lookup and textification
- comments: Block comment stripping
- mixins: Sub-template inlining ({#mixin name})
- variables: Variable interpolation ({ path })
- conditionals: Condition evaluation and if/else blocks
- loops: Collection iteration ({#forEach}, {#forOf})
- ranges: Indexed range iteration ({#arr})
- whitespace: Optional whitespace removal
"""
from __future__ import annotations

from .base import (
    ContentTransformer,
    Directive,
    ScanningTransformer,
    TransformContext,
    TransformerPipeline,
)
from .comments import CommentStripper
from .conditionals import Condition, ConditionalBlock, ConditionalTransformer, ConditionEvaluator
from .loops import CollectionLoop, CollectionLoopTransformer, LoopExpander, iter_elements
from .mixins import MixinReference, MixinTransformer
from .ranges import MAX_ITERATIONS, RangeLoop, RangeLoopTransformer, Step, parse_step
from .references import find_ref, textify
from .variables import VariableReference, VariableTransformer
from .whitespace import WhitespaceStripper

__all__ = [
    # Base classes
    "ContentTransformer",
    "Directive",
    "ScanningTransformer",
    "TransformContext",
    "TransformerPipeline",
    # References
    "find_ref",
    "textify",
    # Comments / whitespace
    "CommentStripper",
    "WhitespaceStripper",
    # Mixins
    "MixinReference",
    "MixinTransformer",
    # Variables
    "VariableReference",
    "VariableTransformer",
    # Conditionals
    "Condition",
    "ConditionalBlock",
    "ConditionalTransformer",
    "ConditionEvaluator",
    # Loops
    "CollectionLoop",
    "CollectionLoopTransformer",
    "LoopExpander",
    "iter_elements",
    # Ranges
    "MAX_ITERATIONS",
    "RangeLoop",
    "RangeLoopTransformer",
    "Step",
    "parse_step",
]
