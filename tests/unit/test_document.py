"""Tests for the default HTML fragment parser."""
from __future__ import annotations

from stromme.core.document import DocumentParser, HtmlFragmentParser


class TestHtmlFragmentParser:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(HtmlFragmentParser(), DocumentParser)

    def test_template_content(self) -> None:
        fragment = HtmlFragmentParser().parse("<template><ul><li>a</li><li>b</li></ul></template>")

        assert fragment.inner_html == "<ul><li>a</li><li>b</li></ul>"
        assert [node.tag for node in fragment.children] == ["ul"]
        assert [li.text_content() for li in fragment.find_all("li")] == ["a", "b"]
        assert fragment.text_content() == "ab"

    def test_text_outside_template_ignored(self) -> None:
        fragment = HtmlFragmentParser().parse("before<template><p>in</p></template>after")
        assert fragment.text_content() == "in"

    def test_void_elements_have_no_children(self) -> None:
        fragment = HtmlFragmentParser().parse("<template>a<br>b</template>")
        kinds = [(node.tag, node.text) for node in fragment.children]
        assert kinds == [(None, "a"), ("br", ""), (None, "b")]
        assert fragment.children[1].children == []

    def test_self_closing_with_attributes(self) -> None:
        fragment = HtmlFragmentParser().parse('<template><img src="x.png" alt="X"/></template>')
        (img,) = fragment.find_all("img")
        assert img.attrs == {"src": "x.png", "alt": "X"}

    def test_nested_template_kept_as_element(self) -> None:
        fragment = HtmlFragmentParser().parse("<template><template><p>x</p></template></template>")
        assert [node.tag for node in fragment.children] == ["template"]
        assert fragment.find_all("p")[0].text_content() == "x"

    def test_without_template_parses_whole_document(self) -> None:
        fragment = HtmlFragmentParser().parse("<p>one</p><p>two</p>")
        assert fragment.inner_html == "<p>one</p><p>two</p>"
        assert [p.text_content() for p in fragment.find_all("p")] == ["one", "two"]

    def test_entities_decoded(self) -> None:
        fragment = HtmlFragmentParser().parse("<template><p>a &amp; b</p></template>")
        assert fragment.text_content() == "a & b"
