"""Condition evaluation for template conditionals.

A condition is a single truthiness check or comparison:

    flag            truthy
    !flag           falsy
    status==open    textified value equals the literal
    status != open  textified value differs from the literal
    !status==open   same as status!=open
    !status!=open   same as status==open

Identifiers may be dotted paths; a missing identifier resolves to ``None``
(falsy) instead of raising. There are no combinators and no ``else if``.

Example usage:
    {#if user.admin}<a href="/admin">Admin</a>{#else}<span>Guest</span>{/if}
    {#if query.tab==settings}...{/if}{#else}...{/if}
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple

from .base import Directive, ScanningTransformer, TransformContext
from .references import find_ref, textify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Condition:
    """Parsed condition expression."""

    identifier: str
    negated: bool = False
    operator: Optional[str] = None
    literal: Optional[str] = None


# (negated, operator) -> True when the check passes on a positive test
_TRUTH_TABLE: Dict[Tuple[bool, Optional[str]], bool] = {
    (False, None): True,
    (True, None): False,
    (False, "=="): True,
    (True, "=="): False,
    (False, "!="): False,
    (True, "!="): True,
}


class ConditionEvaluator:
    """Parse and evaluate condition expressions against a data mapping."""

    CONDITION_PATTERN = re.compile(
        r"^(?P<negation>!)?(?P<identifier>[^!=\s]+)"
        r"(?:\s*(?P<operator>==|!=)\s*(?P<literal>\S+))?$"
    )

    def parse(self, expr: str) -> Optional[Condition]:
        """Parse ``expr`` into a :class:`Condition`, or None if malformed."""
        match = self.CONDITION_PATTERN.match(expr.strip())
        if not match:
            return None
        literal = match.group("literal")
        if literal is not None and len(literal) >= 2 and literal[0] == literal[-1] and literal[0] in "'\"":
            literal = literal[1:-1]
        return Condition(
            identifier=match.group("identifier"),
            negated=match.group("negation") == "!",
            operator=match.group("operator"),
            literal=literal,
        )

    def evaluate(self, condition: Condition, data: Mapping[str, Any]) -> bool:
        """Evaluate a parsed condition.

        Args:
            condition: Parsed condition
            data: Context to resolve the identifier against

        Returns:
            Boolean result of the condition
        """
        value = find_ref(condition.identifier, data, default=None)
        if condition.operator is None:
            positive = bool(value)
        else:
            positive = textify(value) == condition.literal
        return positive if _TRUTH_TABLE[(condition.negated, condition.operator)] else not positive


@dataclass(frozen=True)
class ConditionalBlock(Directive):
    """``{#if condition}body{#else}alternative{/if}`` with an optional else."""

    condition: str
    body: str
    alternative: Optional[str] = None


class ConditionalTransformer(ScanningTransformer[ConditionalBlock]):
    """Resolve if/else blocks, keeping only the matching branch.

    Accepted spellings:
    - {#if cond}body{/if}
    - {#if cond}body{#else}alternative{/if}
    - {#if cond}body{/if}{#else}alternative{/if}

    Bodies are matched non-greedily, so a nested ``{#if}`` is not re-entered.
    A condition that does not parse leaves the whole block verbatim.
    """

    IF_BLOCK_PATTERN = re.compile(
        r"\{\s?#if\s+(?P<condition>[^}]*?)\s?\}"
        r"(?P<body>.*?)"
        r"(?:"
        r"\{\s?#else\s?\}(?P<alternative>.*?)\{\s?/\s?if\s?\}"
        r"|"
        r"\{\s?/\s?if\s?\}(?:\s*\{\s?#else\s?\}(?P<trailing>.*?)\{\s?/\s?if\s?\})?"
        r")",
        re.DOTALL | re.IGNORECASE,
    )

    def __init__(self, evaluator: Optional[ConditionEvaluator] = None) -> None:
        self.evaluator = evaluator or ConditionEvaluator()

    def scan(self, content: str) -> Iterator[ConditionalBlock]:
        for match in self.IF_BLOCK_PATTERN.finditer(content):
            alternative = match.group("alternative")
            if alternative is None:
                alternative = match.group("trailing")
            yield ConditionalBlock(
                start=match.start(),
                end=match.end(),
                text=match.group(0),
                condition=match.group("condition"),
                body=match.group("body"),
                alternative=alternative,
            )

    def resolve(self, directive: ConditionalBlock, context: TransformContext) -> Optional[str]:
        condition = self.evaluator.parse(directive.condition)
        if condition is None:
            logger.debug("leaving malformed condition verbatim: %r", directive.condition)
            return None
        context.report.conditionals_evaluated += 1
        if self.evaluator.evaluate(condition, context.data):
            return directive.body
        return directive.alternative or ""
