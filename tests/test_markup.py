from __future__ import annotations

import re

import pytest

from companyinfo.adapters.markup import (
    attr_of,
    extract_field,
    extract_rows,
    find_label_cell,
    first_match,
    parse_html,
    table_rows,
)

pytestmark = pytest.mark.unit

NESTED = """
<table id="outer">
  <tr>
    <td>
      <table id="inner">
        <tr><td>Name</td><td>  Acme  </td></tr>
        <tr><td>Code</td><td>123</td></tr>
      </table>
    </td>
  </tr>
</table>
<table class="status_list"><caption>Payments list</caption>
  <tbody><tr><td>a</td></tr><tr><td>b</td></tr></tbody>
</table>
<table class="status_list"><caption>No tbody</caption>
  <tr><td>c</td></tr>
</table>
"""


def test_extract_field_trims_value_next_to_label():
    soup = parse_html(NESTED)
    assert extract_field(soup, "Name") == "Acme"
    assert extract_field(soup, "Code") == "123"


def test_extract_field_missing_label_is_empty_string():
    soup = parse_html(NESTED)
    assert extract_field(soup, "Nope") == ""
    assert extract_field(None, "Name") == ""


def test_find_label_cell_prefers_innermost_cell():
    soup = parse_html(NESTED)
    cell = find_label_cell(soup, "Name")
    assert cell is not None
    assert cell.get_text() == "Name"


def test_extract_rows_by_caption_substring():
    soup = parse_html(NESTED)
    rows = extract_rows(soup, "Payments", css_class="status_list")
    assert [r.get_text().strip() for r in rows] == ["a", "b"]
    assert [r.get_text().strip() for r in extract_rows(soup, "No tbody")] == ["c"]


def test_extract_rows_missing_table_is_empty():
    soup = parse_html(NESTED)
    assert extract_rows(soup, "Missing caption") == []
    assert table_rows(None) == []


def test_attr_of_treats_blank_as_missing():
    soup = parse_html('<a href="">x</a><a href=" /doc ">y</a>')
    first, second = soup.find_all("a")
    assert attr_of(first, "href") is None
    assert attr_of(second, "href") == "/doc"
    assert attr_of(None, "href") is None


def test_first_match():
    pattern = re.compile(r"show_app\((\d+)")
    assert first_match(pattern, "show_app(42, 'x')") == "42"
    assert first_match(pattern, "show_app(abc)") is None
    assert first_match(pattern, None) is None
