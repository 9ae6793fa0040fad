"""Indexed range loops.

Handles counted loops over a collection:

    {#arr items i=0<length i++}<li>{- item[i] -}</li>{/arr}
    {#arr items i=length>0 i-=2}...{/arr}
    {#arr rows r=1<=8 r*=2}{- row[r].title -}{/arr}

Header fields: collection, iterator variable, initial value, comparator,
target and step. ``length`` in the initial or target position is the
collection's element count. Inside the body every ``{- name[var] -}``
placeholder (any ``name``, optionally followed by ``.field.path``) becomes the
element at the iterator's current value.

Every loop is bounded: it stops after ``MAX_ITERATIONS`` expansions or once
the iterator's magnitude exceeds ``MAX_ITERATIONS``, whichever comes first.
"""
from __future__ import annotations

import logging
import operator
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from .base import Directive, ScanningTransformer, TransformContext
from .loops import iter_elements
from .references import find_ref, textify

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 10_000

LENGTH = "length"

Bound = Union[int, str]

COMPARATORS: Dict[str, Callable[[int, int], bool]] = {
    "<": operator.lt,
    ">": operator.gt,
    "<=": operator.le,
    ">=": operator.ge,
}

_STEP_OPERATORS: Dict[str, Callable[[int, int], int]] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.floordiv,
}


@dataclass(frozen=True)
class Step:
    """Step expression applied to the iterator after each expansion."""

    op: str
    amount: int

    def apply(self, value: int) -> int:
        if self.op == "/" and self.amount == 0:
            # Division by zero cannot converge; hold the value and let the cap stop the loop.
            return value
        return _STEP_OPERATORS[self.op](value, self.amount)


@dataclass(frozen=True)
class RangeLoop(Directive):
    """Parsed ``{#arr ...}`` block."""

    collection: str
    variable: str
    initial: Bound
    comparator: str
    target: Bound
    step: Step
    body: str


def parse_step(expr: str, variable: str) -> Optional[Step]:
    """Parse a step expression for ``variable``.

    Supported: ``v++``, ``++v``, ``v--``, ``--v``, ``v+=N``, ``v-=N``,
    ``v*=N``, ``v/=N`` and ``v=v+N`` style long forms.

    Returns:
        The parsed step, or None if ``expr`` is not a step of ``variable``
    """
    expr = re.sub(r"\s+", "", expr)
    name = re.escape(variable)

    if re.fullmatch(rf"{name}\+\+|\+\+{name}", expr):
        return Step("+", 1)
    if re.fullmatch(rf"{name}--|--{name}", expr):
        return Step("-", 1)

    match = re.fullmatch(rf"{name}(?P<op>[-+*/])=(?P<amount>\d+)", expr)
    if match is None:
        match = re.fullmatch(rf"{name}={name}(?P<op>[-+*/])(?P<amount>\d+)", expr)
    if match is None:
        return None
    return Step(match.group("op"), int(match.group("amount")))


class RangeLoopTransformer(ScanningTransformer[RangeLoop]):
    """Expand ``{#arr ...}`` counted loops."""

    RANGE_PATTERN = re.compile(
        r"\{\s?#arr\s+(?P<collection>[^\s}]+)\s+"
        r"(?P<variable>[A-Za-z_$][\w$]*)\s?=\s?(?P<initial>length|-?\d+)\s?"
        r"(?P<comparator><=|>=|<|>)\s?(?P<target>length|-?\d+)\s+"
        r"(?P<step>[^}]+?)\s?\}"
        r"(?P<body>.*?)"
        r"\{\s?/\s?arr\s?\}",
        re.DOTALL | re.IGNORECASE,
    )

    def __init__(self, max_iterations: int = MAX_ITERATIONS) -> None:
        self.max_iterations = max_iterations

    def scan(self, content: str) -> Iterator[RangeLoop]:
        for match in self.RANGE_PATTERN.finditer(content):
            variable = match.group("variable")
            step = parse_step(match.group("step"), variable)
            if step is None:
                logger.debug("leaving range loop with unsupported step verbatim: %r", match.group("step"))
                continue
            yield RangeLoop(
                start=match.start(),
                end=match.end(),
                text=match.group(0),
                collection=match.group("collection"),
                variable=variable,
                initial=_bound(match.group("initial")),
                comparator=match.group("comparator"),
                target=_bound(match.group("target")),
                step=step,
                body=match.group("body"),
            )

    def resolve(self, directive: RangeLoop, context: TransformContext) -> str:
        elements = iter_elements(context.lookup(directive.collection))
        length = len(elements)
        current = length if directive.initial == LENGTH else int(directive.initial)
        target = length if directive.target == LENGTH else int(directive.target)
        compare = COMPARATORS[directive.comparator]
        pattern = _index_pattern(directive.variable)

        results: List[str] = []
        out_of_range_logged = False
        capped = False
        while compare(current, target):
            if len(results) >= self.max_iterations or abs(current) > self.max_iterations:
                capped = True
                break
            in_range = 0 <= current < length
            if not in_range and not out_of_range_logged:
                logger.debug(
                    "range loop over %s reached index %d outside 0..%d",
                    directive.collection, current, length - 1,
                )
                out_of_range_logged = True
            element = elements[current] if in_range else None
            results.append(
                pattern.sub(lambda m: _render_index(m, element, in_range), directive.body)
            )
            current = directive.step.apply(current)

        report = context.report
        report.range_loops_expanded += 1
        report.range_iterations += len(results)
        if capped:
            report.range_loops_capped += 1
            message = (
                f"Range loop over '{directive.collection}' stopped after "
                f"{len(results)} iterations (iterator at {current})"
            )
            report.add_warning(message)
            logger.warning(message)
        return "".join(results)


def _bound(raw: str) -> Bound:
    return LENGTH if raw.lower() == LENGTH else int(raw)


def _index_pattern(variable: str) -> "re.Pattern[str]":
    return re.compile(
        r"\{-\s?[^\s\[{}]+\[" + re.escape(variable) + r"\](?:\.(?P<field>[^\s{}]+?))?\s?-\}"
    )


def _render_index(match: "re.Match[str]", element: Any, in_range: bool) -> str:
    if not in_range:
        return ""
    field = match.group("field")
    if field is None:
        return textify(element)
    return textify(find_ref(field, element))
