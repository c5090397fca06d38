"""HTML extraction helpers for the land titles document search pages."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from plansearch.utils.helpers import normalize_whitespace

from .models import ParseError, RawRow

SUMMARY_SELECTOR = "td.searchResultsPageText"
RESULTS_TABLE_SELECTOR = "table#searchResults"
_SKIPPED_INPUT_TYPES = {"submit", "button", "image", "reset", "file"}
_PAGE_FIELD_PATTERN = re.compile(r"page", re.IGNORECASE)


@dataclass
class FormSpec:
    """A form found on a page, ready to be submitted."""

    action: str
    method: str = "post"
    fields: Dict[str, str] = field(default_factory=dict)
    page_field: str | None = None


def parse_html(html: str | bytes) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def page_text(soup: BeautifulSoup) -> str:
    return normalize_whitespace(soup.get_text(" "))


def extract_results_summary(soup: BeautifulSoup) -> str | None:
    """Return the results banner text, or ``None`` when the page has none."""

    cell = soup.select_one(SUMMARY_SELECTOR)
    if cell is None:
        return None
    text = normalize_whitespace(cell.get_text(" "))
    return text or None


def extract_result_rows(soup: BeautifulSoup) -> List[RawRow]:
    """Return the cell text of every result row in the results table.

    Result rows are the even rows of the table (the first row is the header and
    odd rows after it are spacers). The first cell of each row holds the
    view control and is not part of the data.
    """

    table = soup.select_one(RESULTS_TABLE_SELECTOR)
    if table is None:
        raise ParseError("Results page has no results table")
    container = table.find("tbody", recursive=False) or table
    rows = container.find_all("tr", recursive=False)
    extracted: List[RawRow] = []
    for row in rows[1::2]:
        cells = row.find_all(["td", "th"], recursive=False)
        if len(cells) < 2:
            continue
        extracted.append([normalize_whitespace(cell.get_text(" ")) for cell in cells[1:]])
    return extracted


def _form_fields(form: Tag) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for element in form.find_all(["input", "select", "textarea"]):
        name = element.get("name")
        if not name:
            continue
        if element.name == "input":
            input_type = (element.get("type") or "text").lower()
            if input_type in _SKIPPED_INPUT_TYPES:
                continue
            if input_type in {"checkbox", "radio"} and not element.has_attr("checked"):
                continue
            fields[name] = element.get("value", "")
        elif element.name == "select":
            selected = element.find("option", selected=True) or element.find("option")
            fields[name] = selected.get("value", selected.get_text(strip=True)) if selected else ""
        else:
            fields[name] = element.get_text()
    return fields


def _form_spec(form: Tag, base_url: str) -> FormSpec:
    return FormSpec(
        action=urljoin(base_url, form.get("action") or base_url),
        method=(form.get("method") or "post").lower(),
        fields=_form_fields(form),
    )


def find_search_form(soup: BeautifulSoup, base_url: str, *, lot_field: str = "lotNumber") -> FormSpec:
    """Return the parish/settlement/lot search form."""

    for form in soup.find_all("form"):
        if form.find("input", attrs={"name": lot_field}) is not None:
            return _form_spec(form, base_url)
    raise ParseError("Search page has no parish/settlement/lot form")


def has_page_control(soup: BeautifulSoup, page: int) -> bool:
    """Whether the page offers a ``submitform(page)`` control for ``page``."""

    pattern = re.compile(rf"submitform\(\s*['\"]?{page}['\"]?\s*\)")
    for tag in soup.find_all(True):
        for attribute in ("href", "onclick"):
            value = tag.get(attribute)
            if value and pattern.search(value):
                return True
    return False


def find_pagination_form(soup: BeautifulSoup, base_url: str, page: int) -> FormSpec | None:
    """Return the form that navigates to ``page``, or ``None`` when there is none."""

    if not has_page_control(soup, page):
        return None
    for form in soup.find_all("form"):
        for element in form.find_all("input"):
            name = element.get("name") or ""
            if _PAGE_FIELD_PATTERN.search(name):
                spec = _form_spec(form, base_url)
                spec.page_field = name
                spec.fields[name] = str(page)
                return spec
    return None


__all__ = [
    "FormSpec",
    "extract_result_rows",
    "extract_results_summary",
    "find_pagination_form",
    "find_search_form",
    "has_page_control",
    "page_text",
    "parse_html",
]
