from __future__ import annotations

import logging

from hondenwedstrijd.parsers.base import BaseStrategy
from hondenwedstrijd.parsers.element import Element
from hondenwedstrijd.parsers.fields import FieldKind, assign_by_content
from hondenwedstrijd.parsers.registry import register_strategy
from hondenwedstrijd.schemas import Candidate

logger = logging.getLogger(__name__)

# First selector that matches anything is used for the whole container
ITEM_SELECTORS = [
    ".event",
    ".event-item",
    ".wedstrijd",
    ".match",
    ".kalender-item",
    ".calendar-item",
    "[data-event]",
    "[itemtype*=Event]",
]

FIELD_SELECTORS: dict[str, list[str]] = {
    "date_text": ["time", ".date", ".datum", "[itemprop=startDate]", "[class*=date]", "[class*=datum]"],
    "type": [".type", ".soort", ".title", "[itemprop=name]", "h2", "h3", "h4", "[class*=type]", "[class*=title]"],
    "category": [".category", ".categorie", ".klasse", "[class*=categ]"],
    "organizer": [".organizer", ".organisator", "[itemprop=organizer]", "[class*=organi]"],
    "location": [".location", ".locatie", ".plaats", "[itemprop=location]", "[class*=locat]", "[class*=plaats]"],
    "status_text": [".status", ".inschrijving", "[class*=status]", "[class*=inschrijv]"],
}

_CONTENT_FIELDS = {
    FieldKind.DATE: "date_text",
    FieldKind.TYPE: "type",
    FieldKind.CATEGORY: "category",
    FieldKind.LOCATION: "location",
    FieldKind.STATUS: "status_text",
}


@register_strategy("list", priority=20)
class ListStrategy(BaseStrategy):
    """Calendar rendered as repeated event cards or list items.

    Each item's fields come from per-field sub-element selectors. Items
    whose markup carries no usable classes at all fall back to guessing
    each child's field from the shape of its text.
    """

    def extract(self, container: Element) -> list[Candidate]:
        items: list[Element] = []
        for selector in ITEM_SELECTORS:
            items = container.select_all(selector)
            if items:
                logger.debug("List items matched by %r: %d", selector, len(items))
                break

        return [self._extract_item(item) for item in items]

    def _extract_item(self, item: Element) -> Candidate:
        fields = {name: self._field_text(item, name, selectors) for name, selectors in FIELD_SELECTORS.items()}

        if not fields["date_text"] and not fields["type"]:
            texts = [child.text() for child in item.children()] or [item.text()]
            guessed = assign_by_content(texts)
            for kind, name in _CONTENT_FIELDS.items():
                if kind in guessed and not fields[name]:
                    fields[name] = guessed[kind]

        return Candidate(strategy=self.name, **fields)

    @staticmethod
    def _field_text(item: Element, name: str, selectors: list[str]) -> str:
        for selector in selectors:
            el = item.select_first(selector)
            if el is None:
                continue
            if name == "date_text":
                # <time datetime="2025-05-12"> beats the human-readable text
                machine = el.attr("datetime") or el.attr("content")
                if machine:
                    return machine
            text = el.text()
            if text:
                return text
        return ""
