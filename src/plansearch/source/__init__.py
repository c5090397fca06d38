"""Paginated plan sources and their session contract."""

from __future__ import annotations

import requests

from plansearch.config.policies import Policies

from .base import DEFAULT_PAGE_SIZE, PaginatedSource, compute_total_pages, opened, parse_result_count
from .client import HttpPlanSource
from .models import NoResults, ParseError, PlanSearchError, RawRow, SessionError, SessionHandle


def build_source(policies: Policies) -> HttpPlanSource:
    """Construct the HTTP source wired according to policy settings."""

    return HttpPlanSource(policies.source, session_factory=requests.Session)


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "HttpPlanSource",
    "NoResults",
    "PaginatedSource",
    "ParseError",
    "PlanSearchError",
    "RawRow",
    "SessionError",
    "SessionHandle",
    "build_source",
    "compute_total_pages",
    "opened",
    "parse_result_count",
]
