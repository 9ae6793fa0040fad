"""
Strømme - directive-based text templating engine

Strømme resolves mixins, variables, conditionals and loops in marked-up
template strings against a data context.
"""

__version__ = "0.5.0"

from stromme.core.template import Stromme, TemplateHandle
from stromme.core.options import RenderOptions
from stromme.core.exceptions import (
    MixinNotFoundError,
    OptionsError,
    StrommeError,
    TemplateReferenceError,
)

__all__ = [
    "__version__",
    "Stromme",
    "TemplateHandle",
    "RenderOptions",
    "StrommeError",
    "TemplateReferenceError",
    "MixinNotFoundError",
    "OptionsError",
]
