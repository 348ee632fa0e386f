from __future__ import annotations

import logging
import re

from hondenwedstrijd.parsers.base import BaseStrategy
from hondenwedstrijd.parsers.dates import DATE_LIKE_RE
from hondenwedstrijd.parsers.element import Element
from hondenwedstrijd.parsers.registry import register_strategy
from hondenwedstrijd.schemas import Candidate

logger = logging.getLogger(__name__)

# Elements that can hold one event's worth of text
BLOCK_SELECTOR = "p, li, dd, dt, div, section, article, tr, td, th, h1, h2, h3, h4, h5, h6"

# Separator between child elements when flattening an element's text
CHILD_SEPARATOR = " | "

SPLIT_RE = re.compile(r"\s*[|,;•·–—]\s*|\s+-\s+")


@register_strategy("free_text", priority=30)
class FreeTextStrategy(BaseStrategy):
    """Last resort: regex scan of arbitrary element text.

    Uses the innermost block elements containing a date. After removing
    the date, the rest is split on separator punctuation; the first three
    parts are type, location and category and whatever follows them is
    read as the registration status. A category such as "Open klasse"
    never decides the status.
    """

    def extract(self, container: Element) -> list[Candidate]:
        candidates = []
        for block in container.select_all(BLOCK_SELECTOR):
            text = block.text(separator=CHILD_SEPARATOR)
            match = DATE_LIKE_RE.search(text)
            if not match:
                continue
            if self._has_dated_block_inside(block):
                continue
            candidates.append(self._candidate_from_text(text, match))
        logger.debug("Free text: %d dated blocks", len(candidates))
        return candidates

    @staticmethod
    def _has_dated_block_inside(block: Element) -> bool:
        return any(
            DATE_LIKE_RE.search(inner.text())
            for inner in block.select_all(BLOCK_SELECTOR)
        )

    def _candidate_from_text(self, text: str, match: re.Match) -> Candidate:
        remainder = text[: match.start()] + " " + text[match.end():]
        parts = [p.strip() for p in SPLIT_RE.split(remainder)]
        parts = [p for p in parts if p]
        parts += [""] * (3 - len(parts))
        return Candidate(
            strategy=self.name,
            date_text=match.group(0),
            type=parts[0],
            location=parts[1],
            category=parts[2],
            status_text=" ".join(parts[3:]),
        )
