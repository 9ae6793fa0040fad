"""Render reporting dataclasses.

Provides a structured summary of what a pipeline run resolved.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Set


@dataclass
class RenderReport:
    """Report from a single ``instantiate`` call.

    Contains everything the pipeline touched:
    - Comments stripped
    - Mixins inlined and variables substituted
    - Conditionals evaluated
    - Collection and range loops expanded
    - Warnings (e.g. range loops stopped by the iteration cap)
    """

    comments_stripped: int = 0
    mixins_inlined: Set[str] = field(default_factory=set)
    variables_substituted: Set[str] = field(default_factory=set)
    conditionals_evaluated: int = 0
    loops_expanded: int = 0
    range_loops_expanded: int = 0
    range_iterations: int = 0
    range_loops_capped: int = 0
    whitespace_stripped: bool = False

    warnings: List[str] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        """Check if there are any warnings."""
        return bool(self.warnings)

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert report to dictionary for serialization."""
        return {
            "comments_stripped": self.comments_stripped,
            "mixins_inlined": sorted(self.mixins_inlined),
            "variables_substituted": sorted(self.variables_substituted),
            "conditionals_evaluated": self.conditionals_evaluated,
            "loops_expanded": self.loops_expanded,
            "range_loops_expanded": self.range_loops_expanded,
            "range_iterations": self.range_iterations,
            "range_loops_capped": self.range_loops_capped,
            "whitespace_stripped": self.whitespace_stripped,
            "warnings": self.warnings,
        }


__all__ = ["RenderReport"]
