"""Tests for the Stromme entry point and template handles."""
from __future__ import annotations

import dataclasses

import pytest

from stromme import (
    MixinNotFoundError,
    OptionsError,
    RenderOptions,
    Stromme,
    TemplateHandle,
    TemplateReferenceError,
)
from stromme.core.document import TemplateFragment
from stromme.core.template import TEMPLATE_CLOSE, TEMPLATE_OPEN, strip_markers, wrap_markers


@pytest.fixture
def stromme() -> Stromme:
    return Stromme()


# =============================================================================
# Boundary markers
# =============================================================================


class TestMarkers:
    def test_wrap(self) -> None:
        assert wrap_markers("x") == "<template>x</template>"

    def test_wrap_is_idempotent(self) -> None:
        wrapped = "<template>x</template>"
        assert wrap_markers(wrapped) == wrapped

    def test_strip(self) -> None:
        assert strip_markers("<template>a<TEMPLATE>b</Template></template>") == "ab"


# =============================================================================
# Handles
# =============================================================================


class TestTemplateHandle:
    def test_template_wraps_source(self, stromme: Stromme) -> None:
        handle = stromme.template("<p>{ a }</p>")
        assert isinstance(handle, TemplateHandle)
        assert handle.source == "<p>{ a }</p>"
        assert handle.wrapped == f"{TEMPLATE_OPEN}<p>{{ a }}</p>{TEMPLATE_CLOSE}"

    def test_compile_to_mixin_strips_markers(self, stromme: Stromme) -> None:
        handle = stromme.template("<footer>{ site }</footer>")
        assert handle.compile_to_mixin() == "<footer>{ site }</footer>"

    def test_handle_is_immutable(self, stromme: Stromme) -> None:
        handle = stromme.template("x")
        with pytest.raises(dataclasses.FrozenInstanceError):
            handle.source = "y"  # type: ignore[misc]

    def test_handle_is_reusable(self, stromme: Stromme) -> None:
        handle = stromme.template("{ n }")
        assert handle.instantiate(None, {"n": 1}) == "1"
        assert handle.instantiate(None, {"n": 2}) == "2"
        assert handle.wrapped == "<template>{ n }</template>"


# =============================================================================
# Instantiation
# =============================================================================


class TestInstantiate:
    def test_plain_text_is_identity(self, stromme: Stromme) -> None:
        text = "<p>No directives here.</p>\n"
        assert stromme.template(text).instantiate(None, {}) == text

    def test_variable(self, stromme: Stromme) -> None:
        assert stromme.template("{ a.b }").instantiate(None, {"a": {"b": 7}}) == "7"

    @pytest.mark.parametrize(
        "data,expected",
        [({"flag": True}, " yes "), ({"flag": False}, " no "), ({}, " no ")],
    )
    def test_if_else(self, stromme: Stromme, data, expected: str) -> None:
        handle = stromme.template("{#if flag} yes {#else} no {/if}")
        assert handle.instantiate(None, data) == expected

    def test_negated_condition(self, stromme: Stromme) -> None:
        handle = stromme.template("{#if !flag}hidden{/if}")
        assert handle.instantiate(None, {"flag": False}) == "hidden"
        assert handle.instantiate(None, {"flag": True}) == ""

    def test_for_each(self, stromme: Stromme) -> None:
        handle = stromme.template("{#forEach x in items}{- x.v -}{/forEach}")
        assert handle.instantiate(None, {"items": [{"v": "a"}, {"v": "b"}]}) == "ab"

    def test_range_loop(self, stromme: Stromme) -> None:
        handle = stromme.template("{#arr items x=0<3 x++}{- i[x] -}{/arr}")
        assert handle.instantiate(None, {"items": ["a", "b", "c", "d"]}) == "abc"

    def test_mixin_stub(self, stromme: Stromme) -> None:
        class Footer:
            def compile_to_mixin(self) -> str:
                return "F"

        result = stromme.template("{#mixin footer}").instantiate(None, {"mixins": {"footer": Footer()}})
        assert result == "F"
        assert "<template>" not in result

    def test_mixin_handle_resolved_with_page_context(self) -> None:
        stromme = Stromme({"site": "Røut"})
        footer = stromme.template("<footer>{ site }</footer>")
        page = stromme.template("<main>{ title }</main>{#mixin footer}")

        result = page.instantiate(None, {"title": "Hi", "mixins": {"footer": footer}})
        assert result == "<main>Hi</main><footer>Røut</footer>"

    def test_missing_mixin(self, stromme: Stromme) -> None:
        with pytest.raises(MixinNotFoundError):
            stromme.template("{#mixin footer}").instantiate(None, {"mixins": {}})

    def test_missing_reference_raises(self, stromme: Stromme) -> None:
        with pytest.raises(TemplateReferenceError):
            stromme.template("a { nope } b").instantiate()

    @pytest.mark.parametrize(
        "path",
        [
            "mixins.footer.owner._data",
            "mixins.footer.compile_to_mixin.__func__.__globals__.__name__",
            "mixins.footer.__class__",
        ],
    )
    def test_handle_internals_unreachable(self, stromme: Stromme, path: str) -> None:
        footer = stromme.template("<footer/>")
        with pytest.raises(TemplateReferenceError):
            stromme.template("{ " + path + " }").instantiate(None, {"mixins": {"footer": footer}})

    def test_with_report(self, stromme: Stromme) -> None:
        result, report = stromme.template("{ a }/* c */").instantiate_with_report(None, {"a": "x"})
        assert result == "x"
        assert report.variables_substituted == {"a"}
        assert report.comments_stripped == 1


# =============================================================================
# Context merging
# =============================================================================


class TestContext:
    def test_call_data_wins_over_defaults(self) -> None:
        stromme = Stromme({"a": "default", "b": "keep"})
        assert stromme.template("{a}-{b}").instantiate(None, {"a": "call"}) == "call-keep"

    def test_defaults_are_read_only(self) -> None:
        stromme = Stromme({"a": 1})
        with pytest.raises(TypeError):
            stromme.data["a"] = 2  # type: ignore[index]

    def test_caller_data_not_mutated(self) -> None:
        stromme = Stromme({"d": 1})
        data = {"x": 1}
        stromme.template("{ x }{ d }").instantiate("p=1", data)
        assert data == {"x": 1}
        assert dict(stromme.data) == {"d": 1}

    def test_query_string(self, stromme: Stromme) -> None:
        handle = stromme.template("{ query.page }/{ query.tab }")
        assert handle.instantiate("?page=2&tab=home") == "2/home"

    def test_query_mapping(self, stromme: Stromme) -> None:
        assert stromme.template("{ query.q }").instantiate({"q": "x"}) == "x"

    def test_query_pairs_last_wins(self, stromme: Stromme) -> None:
        handle = stromme.template("{ query.q }")
        assert handle.instantiate([("q", "a"), ("q", "b")]) == "b"
        assert handle.instantiate("q=a&q=b") == "b"

    def test_query_overrides_data_key(self, stromme: Stromme) -> None:
        handle = stromme.template("{ query.q }")
        assert handle.instantiate("q=real", {"query": {"q": "fake"}}) == "real"

    def test_query_drives_conditionals(self, stromme: Stromme) -> None:
        handle = stromme.template("{#if query.tab==settings}S{#else}H{/if}")
        assert handle.instantiate("tab=settings") == "S"
        assert handle.instantiate("tab=home") == "H"
        assert handle.instantiate() == "H"


# =============================================================================
# Options
# =============================================================================


class TestOptions:
    def test_whitespace_kept_by_default(self, stromme: Stromme) -> None:
        assert stromme.template("<p> a </p>").instantiate() == "<p> a </p>"

    def test_strip_whitespace_mapping(self, stromme: Stromme) -> None:
        handle = stromme.template("<ul>\n  <li> a </li>\n</ul>")
        assert handle.instantiate(None, {}, {"stripWhitespace": True}) == "<ul><li>a</li></ul>"

    def test_constructor_options_are_default(self) -> None:
        stromme = Stromme(options={"strip_whitespace": True})
        handle = stromme.template("a b")
        assert handle.instantiate() == "ab"
        assert handle.instantiate(None, None, {"stripWhitespace": False}) == "a b"
        assert handle.instantiate(None, None, {}) == "ab"

    def test_render_options_instance(self, stromme: Stromme) -> None:
        handle = stromme.template("a b")
        assert handle.instantiate(None, None, RenderOptions(strip_whitespace=True)) == "ab"

    def test_invalid_options(self, stromme: Stromme) -> None:
        with pytest.raises(OptionsError):
            stromme.template("x").instantiate(None, None, {"stripWhitespace": "yes"})

    def test_invalid_constructor_options(self) -> None:
        with pytest.raises(OptionsError):
            Stromme(options={"minify": True})


# =============================================================================
# Rendering
# =============================================================================


class TestRender:
    def test_render_resolved_output(self, stromme: Stromme) -> None:
        html = stromme.template("<ul>{#forEach x in items}<li>{- x -}</li>{/forEach}</ul>").instantiate(
            None, {"items": ["a", "b"]}
        )
        fragment = stromme.render(html)

        assert isinstance(fragment, TemplateFragment)
        assert fragment.inner_html == "<ul><li>a</li><li>b</li></ul>"
        assert [li.text_content() for li in fragment.find_all("li")] == ["a", "b"]

    def test_custom_parser(self) -> None:
        seen = []

        class RecordingParser:
            def parse(self, html: str) -> TemplateFragment:
                seen.append(html)
                return TemplateFragment(inner_html=html)

        stromme = Stromme(parser=RecordingParser())
        stromme.render("<b>x</b>")
        assert seen == ["<template><b>x</b></template>"]
