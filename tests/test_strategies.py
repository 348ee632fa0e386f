"""Tests for the markup strategies and the registry.

Strategies are fed small synthetic documents through Element so each
layout shape can be checked on its own.
"""

from __future__ import annotations

import pytest

from hondenwedstrijd.parsers.element import Element
from hondenwedstrijd.parsers.free_text import FreeTextStrategy
from hondenwedstrijd.parsers.listing import ListStrategy
from hondenwedstrijd.parsers.registry import get_strategies, get_strategy, list_strategy_keys
from hondenwedstrijd.parsers.table import TableStrategy


def _doc(body: str) -> Element:
    return Element.parse(f"<html><body>{body}</body></html>")


# ---------------------------------------------------------------------------
# Element
# ---------------------------------------------------------------------------
class TestElement:
    def test_strips_non_content_tags(self):
        doc = _doc("<p>Kalender</p><script>var x = '12-05-2025';</script><style>p {}</style>")
        assert doc.text() == "Kalender"

    def test_text_collapses_whitespace(self):
        doc = _doc("<p>  Veld\n\n   wedstrijd  </p>")
        assert doc.select_first("p").text() == "Veld wedstrijd"

    def test_text_with_separator_drops_empty_fragments(self):
        doc = _doc("<div><span>12-05-2025</span> <span></span><span> SJP </span></div>")
        assert doc.select_first("div").text(separator=" | ") == "12-05-2025 | SJP"

    def test_attr_and_children(self):
        doc = _doc('<div class="event big"><time datetime="2025-05-12">12 mei</time>tekst<b>x</b></div>')
        div = doc.select_first("div")
        assert div.attr("class") == "event big"
        assert div.attr("missing") is None
        assert [c.name for c in div.children()] == ["time", "b"]

    def test_select_first_none(self):
        assert _doc("<p>x</p>").select_first("table") is None


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
class TestRegistry:
    def test_priority_order(self):
        assert list_strategy_keys() == ["table", "list", "free_text"]

    def test_names_set_from_keys(self):
        assert [s.name for s in get_strategies()] == ["table", "list", "free_text"]

    def test_options_only_reach_strategies_that_declare_them(self):
        table, listing, free_text = get_strategies(min_columns=5)
        assert table.min_columns == 5
        assert isinstance(listing, ListStrategy)
        assert isinstance(free_text, FreeTextStrategy)

    def test_unknown_key(self):
        with pytest.raises(KeyError, match="Unknown strategy"):
            get_strategy("calendar_api")


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------
class TestTableStrategy:
    def test_header_driven_columns(self):
        doc = _doc(
            "<table>"
            "<tr><th>Locatie</th><th>Datum</th><th>Soort</th><th>Status</th></tr>"
            "<tr><td>Ede</td><td>12-05-2025</td><td>SJP</td><td>Inschrijven</td></tr>"
            "</table>"
        )
        [c] = TableStrategy().extract(doc)
        assert c.date_text == "12-05-2025"
        assert c.type == "SJP"
        assert c.location == "Ede"
        assert c.status_text == "Inschrijven"
        assert c.category == ""
        assert c.strategy == "table"

    def test_rows_below_min_columns_are_skipped(self):
        doc = _doc(
            "<table>"
            "<tr><th>Datum</th><th>Type</th><th>Locatie</th></tr>"
            "<tr><td>12-05-2025</td><td>SJP</td><td>Ede</td></tr>"
            "<tr><td colspan='3'>Geen wedstrijden in juli</td></tr>"
            "</table>"
        )
        candidates = TableStrategy().extract(doc)
        assert len(candidates) == 1

    def test_short_row_with_low_threshold_leaves_missing_fields_blank(self):
        doc = _doc(
            "<table>"
            "<tr><th>Datum</th><th>Type</th><th>Locatie</th></tr>"
            "<tr><td>12-05-2025</td><td>SJP</td></tr>"
            "</table>"
        )
        [c] = TableStrategy(min_columns=2).extract(doc)
        assert c.type == "SJP"
        assert c.location == ""

    def test_table_without_date_or_type_column_is_ignored(self):
        doc = _doc(
            "<table>"
            "<tr><th>Naam</th><th>Adres</th><th>Telefoon</th></tr>"
            "<tr><td>VJG</td><td>Ede</td><td>0318</td></tr>"
            "</table>"
        )
        assert TableStrategy().extract(doc) == []

    def test_narrow_table_is_ignored(self):
        doc = _doc(
            "<table><tr><th>Datum</th><th>Type</th></tr>"
            "<tr><td>12-05-2025</td><td>SJP</td></tr></table>"
        )
        assert TableStrategy().extract(doc) == []
        assert len(TableStrategy(min_columns=2).extract(doc)) == 1

    def test_nested_table_rows_are_not_read_as_own_rows(self):
        doc = _doc(
            "<table><thead><tr><th>Datum</th><th>Type</th><th>Locatie</th></tr></thead>"
            "<tbody><tr><td>12-05-2025</td><td>SJP</td><td>Ede"
            "<table><tr><td>14-06-2025</td><td>Route</td><td>Kaart</td></tr></table>"
            "</td></tr></tbody></table>"
        )
        candidates = TableStrategy().extract(doc)
        assert [(c.date_text, c.type) for c in candidates] == [("12-05-2025", "SJP")]

    def test_header_only_table(self):
        doc = _doc("<table><tr><th>Datum</th><th>Type</th><th>Locatie</th></tr></table>")
        assert TableStrategy().extract(doc) == []


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------
class TestListStrategy:
    def test_field_selectors(self):
        doc = _doc(
            '<div class="event">'
            '<time datetime="2025-09-20">za 20 sep</time>'
            '<h3 class="title">Veldwedstrijd</h3>'
            '<span class="klasse">Open klasse</span>'
            '<span class="plaats">Ede</span>'
            '<span class="status">Gesloten</span>'
            "</div>"
        )
        [c] = ListStrategy().extract(doc)
        assert c.date_text == "2025-09-20"
        assert c.type == "Veldwedstrijd"
        assert c.category == "Open klasse"
        assert c.location == "Ede"
        assert c.status_text == "Gesloten"
        assert c.strategy == "list"

    def test_first_matching_item_selector_wins(self):
        doc = _doc(
            '<li class="wedstrijd"><span class="datum">01-06-2025</span><span class="type">MAP</span></li>'
            '<div class="event"><span class="datum">02-06-2025</span><span class="type">SJP</span></div>'
        )
        [c] = ListStrategy().extract(doc)
        assert c.type == "SJP"

    def test_unstyled_items_fall_back_to_content_shape(self):
        doc = _doc(
            '<ul><li class="kalender-item">'
            "<span>12-05-2025</span><span>Apporteerwedstrijd Retrievers</span>"
            "<span>Assen, Drenthe</span><span>Inschrijven</span>"
            "</li></ul>"
        )
        [c] = ListStrategy().extract(doc)
        assert c.date_text == "12-05-2025"
        assert c.type == "Apporteerwedstrijd Retrievers"
        assert c.location == "Assen, Drenthe"
        assert c.status_text == "Inschrijven"

    def test_no_items(self):
        assert ListStrategy().extract(_doc("<p>Geen wedstrijden</p>")) == []


# ---------------------------------------------------------------------------
# Free text
# ---------------------------------------------------------------------------
class TestFreeTextStrategy:
    def test_splits_remainder_into_type_location_category(self):
        doc = _doc("<p>12-04-2025 – Veldwedstrijd, Lochem, A</p>")
        [c] = FreeTextStrategy().extract(doc)
        assert c.date_text == "12-04-2025"
        assert c.type == "Veldwedstrijd"
        assert c.location == "Lochem"
        assert c.category == "A"
        assert c.strategy == "free_text"

    def test_uses_innermost_dated_block(self):
        doc = _doc(
            "<div><section>"
            "<p>26/04/2025 | SJP | Hellendoorn | B | Inschrijven</p>"
            "<p>03-05-2025 - MAP - Putten</p>"
            "</section></div>"
        )
        candidates = FreeTextStrategy().extract(doc)
        assert [c.type for c in candidates] == ["SJP", "MAP"]
        assert candidates[0].category == "B"
        assert candidates[0].status_text == "Inschrijven"
        assert candidates[1].location == "Putten"

    def test_status_comes_from_parts_after_category(self):
        doc = _doc("<p>12-04-2025 | Veldwedstrijd | Lochem | Open klasse | Gesloten</p>")
        [c] = FreeTextStrategy().extract(doc)
        assert c.category == "Open klasse"
        assert c.status_text == "Gesloten"

    def test_no_trailing_parts_means_no_status(self):
        [c] = FreeTextStrategy().extract(_doc("<p>12-04-2025, Veldwedstrijd, Lochem, Open klasse</p>"))
        assert c.status_text == ""

    def test_block_with_only_a_date_has_empty_fields(self):
        [c] = FreeTextStrategy().extract(_doc("<p>14-06-2025</p>"))
        assert c.type == ""
        assert not c.has_key_fields

    def test_text_without_date_is_ignored(self):
        assert FreeTextStrategy().extract(_doc("<p>Meer informatie volgt.</p>")) == []
