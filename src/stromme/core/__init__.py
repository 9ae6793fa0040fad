"""Strømme core library package.

Holds the directive pipeline (``transformers``), the engine that orders it,
the template handle, options, reporting and document rendering.
"""

from . import exceptions  # noqa: F401
