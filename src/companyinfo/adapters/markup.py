"""Markup extractor (BeautifulSoup).

All lookups are keyed on literal substrings of label/caption text because the
registry pages carry no stable ids for most fields. Nothing here fails on a
missing match: callers get `""`, `None` or `[]` and decide what that means.
Text is trimmed; no date parsing or number coercion happens at this layer.
"""

from __future__ import annotations

import re
from typing import Iterable

from bs4 import BeautifulSoup, NavigableString, Tag


def parse_html(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def text_of(node: Tag | NavigableString | None) -> str:
    if node is None:
        return ""
    if isinstance(node, NavigableString):
        return str(node).strip()
    return node.get_text().strip()


def attr_of(node: Tag | None, name: str) -> str | None:
    """Attribute value, or None when the node or the attribute is missing."""

    if node is None:
        return None
    value = node.get(name)
    if isinstance(value, list):
        value = " ".join(value)
    if value is None or not str(value).strip():
        return None
    return str(value).strip()


def cells(row: Tag) -> list[Tag]:
    """Direct `<td>` children of a row (nested tables are not flattened in)."""

    return row.find_all("td", recursive=False)


def table_rows(table: Tag | None) -> list[Tag]:
    """Rows of `table` itself, looking through an optional `<tbody>`."""

    if table is None:
        return []
    rows: list[Tag] = []
    for child in table.find_all(["thead", "tbody", "tfoot"], recursive=False):
        rows.extend(child.find_all("tr", recursive=False))
    rows.extend(table.find_all("tr", recursive=False))
    return rows


def find_label_cell(scope: Tag | None, label: str) -> Tag | None:
    """First innermost `<td>` whose text contains `label`.

    Outer cells wrapping a nested table also "contain" the label; they are
    skipped in favour of the cell that holds it directly.
    """

    if scope is None or not label:
        return None
    for td in scope.find_all("td"):
        if label not in td.get_text():
            continue
        if any(label in inner.get_text() for inner in td.find_all("td")):
            continue
        return td
    return None


def value_cell(scope: Tag | None, label: str) -> Tag | None:
    """The sibling `<td>` right after the label cell."""

    label_cell = find_label_cell(scope, label)
    if label_cell is None:
        return None
    return label_cell.find_next_sibling("td")


def extract_field(scope: Tag | None, label: str) -> str:
    """Text of the cell next to the cell containing `label` ("" when absent)."""

    return text_of(value_cell(scope, label))


def find_table_by_caption(scope: Tag | None, caption: str, *, css_class: str | None = None) -> Tag | None:
    """First table (optionally with `css_class`) whose `<caption>` contains `caption`."""

    if scope is None:
        return None
    tables: Iterable[Tag] = scope.find_all("table", class_=css_class) if css_class else scope.find_all("table")
    for table in tables:
        cap = table.find("caption", recursive=False)
        if cap is not None and caption in cap.get_text():
            return table
    return None


def extract_rows(scope: Tag | None, caption: str, *, css_class: str | None = None) -> list[Tag]:
    """Row handles of the table whose caption contains `caption` ([] when absent)."""

    return table_rows(find_table_by_caption(scope, caption, css_class=css_class))


def first_match(pattern: re.Pattern[str], value: str | None) -> str | None:
    """First capture group of `pattern` in `value`, if any."""

    if not value:
        return None
    match = pattern.search(value)
    if match is None:
        return None
    return match.group(1)
