"""
Read-only element tree view.

The comparator and normalizer only need a tag name, the attribute pairs and
the ordered element children of a node. ``Element`` builds such trees by
hand; ``SoupElement`` wraps a BeautifulSoup tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from bs4 import BeautifulSoup, Tag

from .exceptions import SelectorNotFound

# Parser configuration - lxml is tolerant of malformed markup and fast.
PARSER = "lxml"


class ElementNode(Protocol):
    @property
    def tag(self) -> str: ...

    @property
    def attributes(self) -> Sequence[tuple[str, str]]: ...

    @property
    def children(self) -> Sequence[ElementNode]: ...


@dataclass(frozen=True)
class Element:
    """A hand-built element, mostly for tests and library callers."""

    tag: str
    attributes: tuple[tuple[str, str], ...] = ()
    children: tuple[Element, ...] = ()


class SoupElement:
    """ElementNode view of a BeautifulSoup tag. Text and comments are skipped."""

    __slots__ = ("_tag",)

    def __init__(self, tag: Tag):
        self._tag = tag

    @property
    def tag(self) -> str:
        return self._tag.name.lower()

    @property
    def attributes(self) -> list[tuple[str, str]]:
        return [(name, _attr_text(value)) for name, value in self._tag.attrs.items()]

    @property
    def children(self) -> list[SoupElement]:
        return [SoupElement(child) for child in self._tag.children if isinstance(child, Tag)]

    def __repr__(self) -> str:
        return f"SoupElement(<{self.tag}>)"


def _attr_text(value: object) -> str:
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def _soup(markup: str) -> BeautifulSoup:
    # Keep class/rel/etc. as the raw attribute string instead of a token list
    return BeautifulSoup(markup, PARSER, multi_valued_attributes=None)


def parse_fragment(markup: str) -> SoupElement:
    """Parse an HTML fragment and return its ``<body>`` container as root."""
    soup = _soup(markup)
    # Head-only fragments (script, style, meta) get no <body> from lxml
    body = soup.body if soup.body is not None else soup.new_tag("body")
    return SoupElement(body)


def select_fragment(document: str, selector: str) -> str:
    """Return the inner markup of the first element matching ``selector``."""
    soup = _soup(document)
    found = soup.select_one(selector)
    if found is None:
        raise SelectorNotFound(selector)
    return found.decode_contents()
