"""Typed view over parsed markup.

Strategies only talk to :class:`Element`, never to BeautifulSoup directly,
so they can be exercised with small synthetic documents.
"""

from __future__ import annotations

import re
from typing import Iterator

from bs4 import BeautifulSoup, Tag

_WS_RE = re.compile(r"\s+")

# Never carry listing content
NON_CONTENT_TAGS = ["script", "style", "noscript", "template", "svg"]


class Element:
    __slots__ = ("_tag",)

    def __init__(self, tag: Tag):
        self._tag = tag

    @classmethod
    def parse(cls, html: str) -> Element:
        """Parse an HTML document and strip non-content elements."""
        soup = BeautifulSoup(html, "html.parser")
        for tag in soup.find_all(NON_CONTENT_TAGS):
            tag.decompose()
        return cls(soup)

    @property
    def name(self) -> str:
        return self._tag.name or ""

    def select_all(self, selector: str) -> list[Element]:
        """All descendants matching a CSS selector, in document order."""
        return [Element(t) for t in self._tag.select(selector)]

    def select_first(self, selector: str) -> Element | None:
        tag = self._tag.select_one(selector)
        return Element(tag) if tag is not None else None

    def children(self) -> Iterator[Element]:
        for child in self._tag.children:
            if isinstance(child, Tag):
                yield Element(child)

    def text(self, separator: str = " ") -> str:
        """Text content with whitespace collapsed.

        With a non-space separator, empty fragments between child elements
        are dropped so ``"a | | b"`` never happens.
        """
        raw = self._tag.get_text(separator=separator)
        if separator.strip():
            parts = [_WS_RE.sub(" ", p).strip() for p in raw.split(separator)]
            return separator.join(p for p in parts if p)
        return _WS_RE.sub(" ", raw).strip()

    def attr(self, name: str) -> str | None:
        value = self._tag.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def __repr__(self) -> str:
        return f"<Element {self.name}>"
