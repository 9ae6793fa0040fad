"""Document rendering for resolved templates.

``Stromme.render`` hands a resolved HTML string to a :class:`DocumentParser`
and gets back a :class:`TemplateFragment`: the content of the first
``<template>`` element as raw inner HTML plus a light node tree.

The default :class:`HtmlFragmentParser` is built on ``lxml.html``; any
object with a compatible ``parse`` method can be plugged in instead.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Protocol, runtime_checkable

from lxml import etree
from lxml import html as lxml_html

TEMPLATE_TAG = "template"


@dataclass
class FragmentNode:
    """Element or text node. Text nodes have ``tag`` set to None."""

    tag: Optional[str] = None
    attrs: Dict[str, Optional[str]] = field(default_factory=dict)
    children: List["FragmentNode"] = field(default_factory=list)
    text: str = ""

    @property
    def is_text(self) -> bool:
        return self.tag is None

    def text_content(self) -> str:
        """Concatenated text of this node and its descendants."""
        if self.is_text:
            return self.text
        return "".join(child.text_content() for child in self.children)

    def iter(self) -> Iterator["FragmentNode"]:
        """Depth-first iteration over this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.iter()


@dataclass
class TemplateFragment:
    """Parsed content of a ``<template>`` element."""

    inner_html: str
    children: List[FragmentNode] = field(default_factory=list)

    def text_content(self) -> str:
        return "".join(child.text_content() for child in self.children)

    def find_all(self, tag: str) -> List[FragmentNode]:
        """Return every element named ``tag`` in document order."""
        tag = tag.lower()
        return [
            node
            for child in self.children
            for node in child.iter()
            if node.tag == tag
        ]


@runtime_checkable
class DocumentParser(Protocol):
    """Protocol for turning resolved HTML into a renderable fragment."""

    def parse(self, html: str) -> TemplateFragment:
        ...


def _child_nodes(element: etree._Element) -> List[FragmentNode]:
    nodes: List[FragmentNode] = []
    if element.text:
        nodes.append(FragmentNode(text=element.text))
    for child in element:
        # Comments and processing instructions carry no tag name; keep their tail only.
        if isinstance(child.tag, str):
            nodes.append(
                FragmentNode(tag=child.tag, attrs=dict(child.attrib), children=_child_nodes(child))
            )
        if child.tail:
            nodes.append(FragmentNode(text=child.tail))
    return nodes


def _inner_html(element: etree._Element) -> str:
    parts = [element.text or ""]
    parts.extend(etree.tostring(child, encoding="unicode", method="html") for child in element)
    return "".join(parts)


class HtmlFragmentParser:
    """Default :class:`DocumentParser` built on ``lxml.html``.

    Documents without a ``<template>`` element are parsed as a whole.
    """

    def parse(self, html: str) -> TemplateFragment:
        if not html.strip():
            return TemplateFragment(inner_html=html)

        root = lxml_html.fragment_fromstring(html, create_parent="div")
        template = next(root.iter(TEMPLATE_TAG), None)
        if template is None:
            return TemplateFragment(inner_html=html, children=_child_nodes(root))
        return TemplateFragment(inner_html=_inner_html(template), children=_child_nodes(template))


__all__ = [
    "DocumentParser",
    "FragmentNode",
    "HtmlFragmentParser",
    "TemplateFragment",
]
