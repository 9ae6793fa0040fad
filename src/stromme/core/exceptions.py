from __future__ import annotations

from typing import Any, Dict, Mapping


class StrommeError(Exception):
    """Base exception for the Strømme engine."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class TemplateReferenceError(StrommeError, LookupError):
    """Raised when a dotted reference cannot be resolved against the context."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        StrommeError.__init__(self, message, context=context)
        LookupError.__init__(self, message)


class MixinNotFoundError(TemplateReferenceError):
    """Raised when ``{#mixin name}`` names a mixin missing from ``context["mixins"]``."""


class OptionsError(StrommeError, ValueError):
    """Raised when render options fail schema validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        StrommeError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "StrommeError",
    "TemplateReferenceError",
    "MixinNotFoundError",
    "OptionsError",
]
