"""Render options for template instantiation.

Options are small, but they are validated the same way every other
structured payload is: a JSON Schema stored as YAML under
``stromme/data/schemas`` and checked with ``jsonschema``.

Precedence (highest first):
1) Per-call options passed to ``TemplateHandle.instantiate``
2) Constructor options passed to ``Stromme(...)``
3) Bundled defaults in ``stromme/data/config/defaults.yaml``
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from jsonschema import Draft202012Validator

from stromme.core.exceptions import OptionsError
from stromme.data import read_yaml

OPTIONS_SCHEMA = "options.schema.yaml"

_ALIASES = {"stripWhitespace": "strip_whitespace"}


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    schema = read_yaml("schemas", OPTIONS_SCHEMA)
    return Draft202012Validator(schema)


def validate_options_payload(payload: Mapping[str, Any]) -> None:
    """Validate a raw options mapping against the bundled schema.

    Raises:
        OptionsError: If the payload does not match the schema.
    """
    errors = sorted(_validator().iter_errors(dict(payload)), key=lambda e: list(e.path))
    if not errors:
        return
    messages = []
    for err in errors:
        location = ".".join(str(p) for p in err.path) or "<root>"
        messages.append(f"{location}: {err.message}")
    raise OptionsError(
        "Invalid render options: " + "; ".join(messages),
        context={"errors": messages},
    )


@dataclass(frozen=True)
class RenderOptions:
    """Options controlling the optional final pipeline stages."""

    strip_whitespace: bool = False

    @classmethod
    def from_mapping(
        cls,
        payload: Mapping[str, Any],
        *,
        base: Optional["RenderOptions"] = None,
    ) -> "RenderOptions":
        """Build options from a camelCase or snake_case mapping.

        Keys absent from ``payload`` keep their value from ``base``.
        """
        validate_options_payload(payload)
        values: Dict[str, Any] = {"strip_whitespace": (base or cls()).strip_whitespace}
        for key, value in payload.items():
            values[_ALIASES.get(key, key)] = value
        return cls(**values)

    @classmethod
    def defaults(cls) -> "RenderOptions":
        """Return the bundled default options."""
        section = read_yaml("config", "defaults.yaml").get("render") or {}
        return cls.from_mapping(section)

    def to_dict(self) -> Dict[str, Any]:
        return {"stripWhitespace": self.strip_whitespace}


OptionsLike = Union[RenderOptions, Mapping[str, Any], None]


def coerce_options(options: OptionsLike, *, base: Optional[RenderOptions] = None) -> RenderOptions:
    """Normalize ``options`` into :class:`RenderOptions`.

    ``None`` yields ``base`` (or the bundled defaults), a mapping is layered
    on top of ``base``, and a ``RenderOptions`` instance is used as-is.
    """
    if isinstance(options, RenderOptions):
        return options
    fallback = base if base is not None else RenderOptions.defaults()
    if options is None:
        return fallback
    if isinstance(options, Mapping):
        return RenderOptions.from_mapping(options, base=fallback)
    raise OptionsError(
        f"Render options must be a mapping or RenderOptions, got {type(options).__name__}",
        context={"type": type(options).__name__},
    )


def load_options(path: Union[str, Path], *, base: Optional[RenderOptions] = None) -> RenderOptions:
    """Load render options from a YAML file.

    The file may hold the options at the top level or under a ``render:``
    key, mirroring ``defaults.yaml``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        OptionsError: If the file is not a mapping or fails validation.
    """
    path = Path(path)
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise OptionsError(
            f"Options file must contain a mapping: {path}",
            context={"path": str(path)},
        )
    section = data.get("render", data)
    if not isinstance(section, dict):
        raise OptionsError(
            f"'render' section must be a mapping: {path}",
            context={"path": str(path)},
        )
    return RenderOptions.from_mapping(section, base=base)


__all__ = [
    "RenderOptions",
    "OptionsLike",
    "coerce_options",
    "load_options",
    "validate_options_payload",
]
