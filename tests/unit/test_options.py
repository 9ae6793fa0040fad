"""Tests for render option validation, layering and loading."""
from __future__ import annotations

from pathlib import Path

import pytest

from stromme.core.exceptions import OptionsError
from stromme.core.options import (
    RenderOptions,
    coerce_options,
    load_options,
    validate_options_payload,
)
from stromme.data import get_data_path, read_yaml


class TestBundledData:
    def test_schema_file_exists(self) -> None:
        assert get_data_path("schemas", "options.schema.yaml").is_file()

    def test_defaults_file(self) -> None:
        assert read_yaml("config", "defaults.yaml")["render"] == {"stripWhitespace": False}

    def test_defaults(self) -> None:
        assert RenderOptions.defaults() == RenderOptions(strip_whitespace=False)


class TestValidation:
    def test_valid_payloads(self) -> None:
        validate_options_payload({})
        validate_options_payload({"stripWhitespace": True})
        validate_options_payload({"strip_whitespace": False})

    def test_unknown_key(self) -> None:
        with pytest.raises(OptionsError) as exc_info:
            validate_options_payload({"minify": True})
        errors = exc_info.value.context["errors"]
        assert len(errors) == 1
        assert errors[0].startswith("<root>:")
        assert "minify" in errors[0]

    def test_wrong_type(self) -> None:
        with pytest.raises(OptionsError) as exc_info:
            validate_options_payload({"stripWhitespace": "yes"})
        assert exc_info.value.context["errors"][0].startswith("stripWhitespace:")

    def test_options_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            validate_options_payload({"stripWhitespace": 1})


class TestRenderOptions:
    def test_from_camel_case(self) -> None:
        assert RenderOptions.from_mapping({"stripWhitespace": True}).strip_whitespace is True

    def test_from_snake_case(self) -> None:
        assert RenderOptions.from_mapping({"strip_whitespace": True}).strip_whitespace is True

    def test_base_fills_missing_keys(self) -> None:
        base = RenderOptions(strip_whitespace=True)
        assert RenderOptions.from_mapping({}, base=base).strip_whitespace is True

    def test_to_dict(self) -> None:
        assert RenderOptions(strip_whitespace=True).to_dict() == {"stripWhitespace": True}


class TestCoerceOptions:
    def test_none_uses_base(self) -> None:
        base = RenderOptions(strip_whitespace=True)
        assert coerce_options(None, base=base) is base

    def test_none_without_base_uses_defaults(self) -> None:
        assert coerce_options(None) == RenderOptions.defaults()

    def test_instance_used_as_is(self) -> None:
        opts = RenderOptions(strip_whitespace=False)
        assert coerce_options(opts, base=RenderOptions(strip_whitespace=True)) is opts

    def test_mapping_layered_over_base(self) -> None:
        base = RenderOptions(strip_whitespace=True)
        assert coerce_options({"stripWhitespace": False}, base=base).strip_whitespace is False

    def test_rejects_other_types(self) -> None:
        with pytest.raises(OptionsError) as exc_info:
            coerce_options(42)  # type: ignore[arg-type]
        assert exc_info.value.context["type"] == "int"


class TestLoadOptions:
    def test_top_level_keys(self, tmp_path: Path) -> None:
        path = tmp_path / "opts.yaml"
        path.write_text("stripWhitespace: true\n", encoding="utf-8")
        assert load_options(path).strip_whitespace is True

    def test_render_section(self, tmp_path: Path) -> None:
        path = tmp_path / "opts.yaml"
        path.write_text("render:\n  strip_whitespace: true\n", encoding="utf-8")
        assert load_options(path).strip_whitespace is True

    def test_empty_file_keeps_base(self, tmp_path: Path) -> None:
        path = tmp_path / "opts.yaml"
        path.write_text("", encoding="utf-8")
        base = RenderOptions(strip_whitespace=True)
        assert load_options(path, base=base).strip_whitespace is True

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "opts.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(OptionsError):
            load_options(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        path = tmp_path / "opts.yaml"
        path.write_text("render:\n  minify: true\n", encoding="utf-8")
        with pytest.raises(OptionsError):
            load_options(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_options(tmp_path / "nope.yaml")
