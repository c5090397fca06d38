"""HTTP paginated source for the land titles document search, built on requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Mapping

import requests
from bs4 import BeautifulSoup
from requests import Response
from requests.exceptions import RequestException

from plansearch.config.policies import SourcePolicy
from plansearch.entities.core import Query
from plansearch.utils.logging import get_logger

from .base import PaginatedSource, parse_result_count
from .models import NoResults, ParseError, RawRow, SessionError, SessionHandle
from .parsing import (
    extract_result_rows,
    extract_results_summary,
    find_pagination_form,
    find_search_form,
    page_text,
    parse_html,
)


@dataclass
class _PageState:
    http: requests.Session
    soup: BeautifulSoup
    url: str


class HttpPlanSource(PaginatedSource):
    """Search plans by parish/settlement and lot over plain HTTP form posts."""

    leading_lot = True

    def __init__(
        self,
        policy: SourcePolicy | None = None,
        *,
        session_factory: Callable[[], requests.Session] | None = None,
    ) -> None:
        self.policy = policy or SourcePolicy()
        self.page_size = self.policy.page_size
        self._session_factory = session_factory or requests.Session
        self._logger = get_logger(component="http_source", base_url=self.policy.base_url)

    def _url(self, path: str) -> str:
        return f"{self.policy.base_url}{path}"

    def _new_http(self) -> requests.Session:
        http = self._session_factory()
        http.headers.update({"User-Agent": self.policy.user_agent})
        http.verify = self.policy.verify_tls
        return http

    def _request(
        self,
        http: requests.Session,
        method: str,
        url: str,
        data: Mapping[str, str] | None = None,
    ) -> Response:
        try:
            if method == "get":
                response = http.get(url, params=data, timeout=self.policy.request_timeout_seconds)
            else:
                response = http.post(url, data=data, timeout=self.policy.request_timeout_seconds)
            response.raise_for_status()
        except RequestException as exc:
            raise SessionError(f"Request to {url} failed: {exc}", retryable=True) from exc
        return response

    def open(self, query: Query) -> SessionHandle | NoResults:
        http = self._new_http()
        try:
            self._request(http, "get", self._url(self.policy.search_page_path))
            form_url = self._url(self.policy.search_form_path)
            form_page = self._request(http, "get", form_url)
            form = find_search_form(parse_html(form_page.text), form_page.url or form_url)
            payload = dict(form.fields)
            payload.update(
                {
                    "lotNumber": query.lot_number,
                    "lotTypeRefId": str(query.lot_type),
                    "parishRefId": str(query.parish),
                    self.policy.submit_field: "Search",
                }
            )
            response = self._request(http, form.method, form.action, payload)
        except ParseError as exc:
            http.close()
            raise SessionError(f"Search form unavailable: {exc}") from exc
        except BaseException:
            http.close()
            raise

        soup = parse_html(response.text)
        state = _PageState(http=http, soup=soup, url=response.url or form.action)
        summary = extract_results_summary(soup)
        if summary is None or _reports_zero(summary):
            self._logger.info("No results", query=query.describe())
            return NoResults(query=query, state=state)
        self._logger.debug("Opened search", query=query.describe(), summary=summary)
        return SessionHandle(query=query, state=state)

    def results_summary(self, handle: SessionHandle) -> str:
        summary = extract_results_summary(handle.state.soup)
        if summary is None:
            raise ParseError("Results page has no results summary")
        return summary

    def current_page_rows(self, handle: SessionHandle) -> List[RawRow]:
        return extract_result_rows(handle.state.soup)

    def advance(self, handle: SessionHandle) -> bool:
        state: _PageState = handle.state
        next_page = handle.page + 1
        form = find_pagination_form(state.soup, state.url, next_page)
        if form is None:
            self._logger.debug("No navigation to next page", page=next_page)
            return False
        response = self._request(state.http, form.method, form.action, form.fields)
        state.soup = parse_html(response.text)
        state.url = response.url or form.action
        handle.page = next_page
        return True

    def close(self, handle: SessionHandle | NoResults) -> None:
        state = handle.state
        if isinstance(state, _PageState):
            state.http.close()

    def maintenance_notice(self) -> str | None:
        http = self._new_http()
        try:
            response = self._request(http, "get", self._url(self.policy.search_page_path))
        finally:
            http.close()
        text = page_text(parse_html(response.text))
        if self.policy.maintenance_marker.lower() in text.lower():
            return "Site is down for scheduled maintenance"
        return None


def _reports_zero(summary: str) -> bool:
    try:
        return parse_result_count(summary) == 0
    except ParseError:
        return False


__all__ = ["HttpPlanSource"]
