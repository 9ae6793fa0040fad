"""Mixin transformer for template composition.

Handles ``{#mixin name}`` directives. The named sub-template must be present
under the reserved ``mixins`` key of the context; its marker-stripped body
replaces the directive.

Example:
    Context: {"mixins": {"footer": stromme.template("<footer>F</footer>")}}
    Template: <main/>{#mixin footer}
    Output: <main/><footer>F</footer>
"""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterator

from stromme.core.exceptions import MixinNotFoundError, StrommeError

from .base import Directive, ScanningTransformer, TransformContext

logger = logging.getLogger(__name__)

MIXINS_KEY = "mixins"


@dataclass(frozen=True)
class MixinReference(Directive):
    name: str


class MixinTransformer(ScanningTransformer[MixinReference]):
    """Inline ``{#mixin name}`` with the named sub-template's body.

    Inlined text is not re-scanned for further mixins; variables and blocks
    inside it are resolved by the later passes.
    """

    MIXIN_PATTERN = re.compile(r"\{\s?#mixin\s+(?P<name>[^}]+?)\s?\}", re.IGNORECASE)

    def scan(self, content: str) -> Iterator[MixinReference]:
        for match in self.MIXIN_PATTERN.finditer(content):
            yield MixinReference(
                start=match.start(),
                end=match.end(),
                text=match.group(0),
                name=match.group("name").strip(),
            )

    def resolve(self, directive: MixinReference, context: TransformContext) -> str:
        mixin = self._get_mixin(directive.name, context)
        if isinstance(mixin, str):
            body = mixin
        elif callable(getattr(mixin, "compile_to_mixin", None)):
            body = mixin.compile_to_mixin()
        else:
            raise StrommeError(
                f"Mixin '{directive.name}' is not a template",
                context={"mixin": directive.name, "type": type(mixin).__name__},
            )
        context.report.mixins_inlined.add(directive.name)
        logger.debug("inlined mixin %s (%d chars)", directive.name, len(body))
        return body

    def _get_mixin(self, name: str, context: TransformContext) -> Any:
        mixins = context.data.get(MIXINS_KEY)
        if not isinstance(mixins, Mapping):
            raise MixinNotFoundError(
                f"Mixin '{name}' referenced but no '{MIXINS_KEY}' mapping in context",
                context={"mixin": name},
            )
        if name not in mixins:
            raise MixinNotFoundError(
                f"Mixin '{name}' not found. Available mixins: {sorted(mixins)}",
                context={"mixin": name, "available": sorted(mixins)},
            )
        return mixins[name]
