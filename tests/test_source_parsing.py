"""Tests for HTML extraction of the registry search pages."""

from __future__ import annotations

import pytest

from plansearch.source.base import compute_total_pages, parse_result_count
from plansearch.source.models import ParseError
from plansearch.source.parsing import (
    extract_result_rows,
    extract_results_summary,
    find_pagination_form,
    find_search_form,
    has_page_control,
    parse_html,
)

RESULTS_PAGE = """
<html><body>
<table><tr><td class="searchResultsPageText">  Displaying records
  1 to 10 of 12 </td></tr></table>
<table id="searchResults">
  <tr><th>View</th><th>Lot</th><th>Deposit</th></tr>
  <tr><td><a href="#">view</a></td><td>5</td><td>D1</td><td>W1</td><td>100</td>
      <td></td><td></td><td>WPG</td><td>Plan</td><td>first  note</td></tr>
  <tr><td colspan="10"></td></tr>
  <tr><td><a href="#">view</a></td><td>5</td><td>D2</td><td>W2</td><td></td>
      <td></td><td></td><td>WPG</td><td>Plan</td><td></td></tr>
</table>
<a href="javascript:submitform(2)">2</a>
<form name="pager" action="/lto/actions/pageResults" method="POST">
  <input type="hidden" name="pageNumber" value="1">
  <input type="hidden" name="sortOrder" value="asc">
</form>
</body></html>
"""


def test_parse_result_count_uses_last_token() -> None:
    assert parse_result_count("Displaying records 1 to 10 of 57") == 57
    assert parse_result_count("Displaying records 1 to 10 of 1,234") == 1234
    assert parse_result_count("0") == 0


@pytest.mark.parametrize("summary", ["", "   ", "Displaying records of many", "of 12."])
def test_parse_result_count_rejects_non_numeric_summaries(summary: str) -> None:
    with pytest.raises(ParseError):
        parse_result_count(summary)


def test_compute_total_pages_rounds_up() -> None:
    assert compute_total_pages("of 57", 10) == 6
    assert compute_total_pages("of 10", 10) == 1
    assert compute_total_pages("of 0", 10) == 0
    with pytest.raises(ValueError):
        compute_total_pages("of 10", 0)


def test_extract_results_summary_normalises_whitespace() -> None:
    soup = parse_html(RESULTS_PAGE)

    assert extract_results_summary(soup) == "Displaying records 1 to 10 of 12"
    assert extract_results_summary(parse_html("<p>nothing</p>")) is None


def test_extract_result_rows_reads_even_rows_after_view_cell() -> None:
    rows = extract_result_rows(parse_html(RESULTS_PAGE))

    assert rows == [
        ["5", "D1", "W1", "100", "", "", "WPG", "Plan", "first note"],
        ["5", "D2", "W2", "", "", "", "WPG", "Plan", ""],
    ]


def test_extract_result_rows_requires_the_table() -> None:
    with pytest.raises(ParseError):
        extract_result_rows(parse_html("<table id='other'></table>"))


def test_pagination_form_targets_requested_page() -> None:
    soup = parse_html(RESULTS_PAGE)

    assert has_page_control(soup, 2)
    assert not has_page_control(soup, 3)

    form = find_pagination_form(soup, "https://tprmb.ca/lto/actions/search", 2)
    assert form is not None
    assert form.action == "https://tprmb.ca/lto/actions/pageResults"
    assert form.method == "post"
    assert form.page_field == "pageNumber"
    assert form.fields == {"pageNumber": "2", "sortOrder": "asc"}
    assert find_pagination_form(soup, "https://tprmb.ca/", 3) is None


def test_find_search_form_collects_default_fields() -> None:
    html = """
    <form action="search.do" method="get"><input name="q"></form>
    <form action="/lto/actions/searchPlans">
      <input type="hidden" name="token" value="abc">
      <input type="text" name="lotNumber">
      <input type="checkbox" name="exact" value="y">
      <select name="lotTypeRefId"><option value="1">Group Lot</option><option value="5" selected>River Lot</option></select>
      <input type="submit" name="go" value="Search">
    </form>
    """

    form = find_search_form(parse_html(html), "https://tprmb.ca/lto/actions/initialize")

    assert form.action == "https://tprmb.ca/lto/actions/searchPlans"
    assert form.method == "post"
    assert form.fields == {"token": "abc", "lotNumber": "", "lotTypeRefId": "5"}


def test_find_search_form_missing() -> None:
    with pytest.raises(ParseError):
        find_search_form(parse_html("<form><input name='other'></form>"), "https://tprmb.ca/")
