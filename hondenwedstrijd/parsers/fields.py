"""Heuristics for deciding which field a cell of text belongs to.

Two modes:

* declared header (table header row): the header is matched against
  per-field synonym lists, first hit wins.
* content shape (no header): date-like text -> date, status keyword ->
  status, comma -> location, long text -> type, anything else -> category.

The content mode is a best-effort guess for markup without any semantic
structure and will misclassify now and then.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from hondenwedstrijd.parsers.dates import DATE_LIKE_RE
from hondenwedstrijd.parsers.status import has_status_keyword

# Shorter text than this is treated as a category ("A", "Open klasse").
TYPE_MIN_LENGTH = 10


class FieldKind(str, Enum):
    DATE = "date"
    TYPE = "type"
    CATEGORY = "category"
    ORGANIZER = "organizer"
    LOCATION = "location"
    STATUS = "status"
    NOTES = "notes"
    UNKNOWN = "unknown"


# Order matters: "Wedstrijdtype" must resolve to TYPE before anything else.
HEADER_SYNONYMS: list[tuple[FieldKind, tuple[str, ...]]] = [
    (FieldKind.DATE, ("datum", "date", "dag", "day")),
    (FieldKind.TYPE, ("type", "soort", "discipline", "wedstrijd", "evenement", "event")),
    (FieldKind.CATEGORY, ("categorie", "category", "klasse", "class")),
    (FieldKind.ORGANIZER, ("organisator", "organisatie", "organizer", "vereniging")),
    (FieldKind.LOCATION, ("locatie", "location", "plaats", "adres", "terrein")),
    (FieldKind.STATUS, ("status", "inschrijving", "registratie", "registration")),
    (FieldKind.NOTES, ("opmerking", "notities", "notes", "info")),
]


def classify_header(header: str) -> FieldKind:
    lowered = header.strip().lower()
    if not lowered:
        return FieldKind.UNKNOWN
    for kind, tokens in HEADER_SYNONYMS:
        if any(tok in lowered for tok in tokens):
            return kind
    return FieldKind.UNKNOWN


def classify_content(text: str) -> FieldKind:
    text = text.strip()
    if DATE_LIKE_RE.search(text):
        return FieldKind.DATE
    if has_status_keyword(text):
        return FieldKind.STATUS
    if "," in text:
        return FieldKind.LOCATION
    if len(text) > TYPE_MIN_LENGTH:
        return FieldKind.TYPE
    return FieldKind.CATEGORY


def classify_cell(text: str, declared_header: str | None = None) -> FieldKind:
    """Classify one cell, by its declared header when there is one."""
    if declared_header is not None:
        return classify_header(declared_header)
    return classify_content(text)


def resolve_columns(headers: Sequence[str]) -> dict[FieldKind, int]:
    """Map each field to the first header column classified as it."""
    columns: dict[FieldKind, int] = {}
    for idx, header in enumerate(headers):
        kind = classify_cell(header, declared_header=header)
        if kind is not FieldKind.UNKNOWN and kind not in columns:
            columns[kind] = idx
    return columns


def assign_by_content(texts: Sequence[str]) -> dict[FieldKind, str]:
    """Classify bare cell texts by shape; first text of each kind wins."""
    fields: dict[FieldKind, str] = {}
    for text in texts:
        if not text.strip():
            continue
        kind = classify_content(text)
        fields.setdefault(kind, text.strip())
    return fields
