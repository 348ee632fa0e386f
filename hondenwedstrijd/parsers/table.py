from __future__ import annotations

import logging

from hondenwedstrijd.parsers.base import BaseStrategy
from hondenwedstrijd.parsers.element import Element
from hondenwedstrijd.parsers.fields import FieldKind, resolve_columns
from hondenwedstrijd.parsers.registry import register_strategy
from hondenwedstrijd.schemas import Candidate

logger = logging.getLogger(__name__)

DEFAULT_MIN_COLUMNS = 3

# Own rows and cells only; a table nested in a cell is read on its own
ROW_SELECTOR = ":scope > tr, :scope > thead > tr, :scope > tbody > tr, :scope > tfoot > tr"
CELL_SELECTOR = ":scope > th, :scope > td"

_CANDIDATE_FIELDS = {
    FieldKind.DATE: "date_text",
    FieldKind.TYPE: "type",
    FieldKind.CATEGORY: "category",
    FieldKind.ORGANIZER: "organizer",
    FieldKind.LOCATION: "location",
    FieldKind.STATUS: "status_text",
    FieldKind.NOTES: "notes",
}


@register_strategy("table", priority=10)
class TableStrategy(BaseStrategy):
    """Calendar rendered as a <table> with a header row.

    The first row is read as headers and each field is resolved to a
    column index by header synonyms, so reordered or renamed columns
    still work. A table without both a date and a type column is not
    a calendar and yields nothing.
    """

    OPTIONS = ("min_columns",)

    def __init__(self, min_columns: int = DEFAULT_MIN_COLUMNS):
        self.min_columns = min_columns

    def extract(self, container: Element) -> list[Candidate]:
        candidates: list[Candidate] = []
        for idx, table in enumerate(container.select_all("table")):
            found = self._extract_table(table)
            logger.debug("Table %d: %d candidate rows", idx, len(found))
            candidates.extend(found)
        return candidates

    def _extract_table(self, table: Element) -> list[Candidate]:
        rows = table.select_all(ROW_SELECTOR)
        if len(rows) < 2:
            return []

        headers = [cell.text() for cell in rows[0].select_all(CELL_SELECTOR)]
        if len(headers) < self.min_columns:
            logger.debug("Skipping table with %d header cells", len(headers))
            return []

        columns = resolve_columns(headers)
        if FieldKind.DATE not in columns or FieldKind.TYPE not in columns:
            logger.debug("Skipping table without date/type columns: %s", headers)
            return []

        candidates = []
        for row in rows[1:]:
            cells = [cell.text() for cell in row.select_all(CELL_SELECTOR)]
            if len(cells) < self.min_columns:
                continue
            fields = {}
            for kind, col in columns.items():
                fields[_CANDIDATE_FIELDS[kind]] = cells[col] if col < len(cells) else ""
            candidates.append(Candidate(strategy=self.name, **fields))
        return candidates
