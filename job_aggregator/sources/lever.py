# job_aggregator/sources/lever.py
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from job_aggregator.errors import ConfigurationError, FetchError
from job_aggregator.fetcher import Fetch, fetch_with_retry
from job_aggregator.models import JobPosting
from job_aggregator.observability import ErrorSink, LoggingErrorSink
from job_aggregator.utils import extract_tags, posting_id, safe_str, stable_fallback_id, to_iso

logger = logging.getLogger(__name__)

PROVIDER = "lever"
API_BASE = "https://api.lever.co/v0/postings"

_REMOTE_RE = re.compile(r"remote", re.IGNORECASE)


def parse_board_url(board_url: str) -> str:
    """https://jobs.lever.co/acme -> 'acme' (first path segment)."""
    u = urlparse(safe_str(board_url))
    host = (u.hostname or "").lower()
    if not host.endswith("lever.co"):
        raise ConfigurationError(f"Invalid Lever URL: {board_url!r}")
    segs = [s for s in u.path.split("/") if s]
    if not segs:
        raise ConfigurationError(f"Invalid Lever URL: {board_url!r} (missing account)")
    return segs[0]


def fallback_url(account: str, job_id: str) -> str:
    return f"https://jobs.lever.co/{account}/{job_id}"


def pick_location(categories: Dict[str, Any]) -> str:
    loc = safe_str(categories.get("location"))
    if loc:
        return loc
    all_locations = categories.get("allLocations")
    if isinstance(all_locations, list):
        return ", ".join(n for n in (safe_str(x) for x in all_locations) if n)
    return ""


def build_description(p: Dict[str, Any]) -> str:
    """
    Main description plus the posting's list sections ("Requirements",
    "What you'll do", ...), which Lever keeps outside `description`.
    """
    parts: List[str] = []
    main = safe_str(p.get("description")) or safe_str(p.get("descriptionPlain"))
    if main:
        parts.append(main)

    lists = p.get("lists")
    if isinstance(lists, list):
        for section in lists:
            if not isinstance(section, dict):
                continue
            heading = safe_str(section.get("text"))
            content = safe_str(section.get("content"))
            if not content:
                continue
            if heading:
                parts.append(f"<h3>{heading}</h3>")
            parts.append(f"<ul>{content}</ul>")

    additional = safe_str(p.get("additional"))
    if additional:
        parts.append(additional)
    return "\n".join(parts)


def map_posting(account: str, p: Dict[str, Any]) -> JobPosting:
    title = safe_str(p.get("text")) or "Untitled"
    hosted_url = safe_str(p.get("hostedUrl"))
    raw_id = safe_str(p.get("id")) or stable_fallback_id(account, title, hosted_url)

    categories = p.get("categories") or {}
    if not isinstance(categories, dict):
        categories = {}
    location = pick_location(categories)
    workplace_type = safe_str(p.get("workplaceType")).lower()

    return JobPosting(
        id=posting_id(PROVIDER, account, raw_id),
        provider=PROVIDER,
        company=account,
        title=title,
        location=location,
        remote=bool(_REMOTE_RE.search(location)) or workplace_type == "remote",
        url=hosted_url or fallback_url(account, raw_id),
        posted_at=to_iso(p.get("createdAt")),
        description_html=build_description(p),
        tags=extract_tags(
            title,
            safe_str(categories.get("team")),
            location,
            safe_str(categories.get("commitment")),
        ),
    )


class LeverSource:
    """
    Fetch postings from Lever's public endpoint:
      https://api.lever.co/v0/postings/{account}?mode=json
    The listing already carries descriptions, so no detail calls are made.
    """

    provider = PROVIDER

    def __init__(
        self,
        board_url: str,
        fetch: Fetch = fetch_with_retry,
        sink: Optional[ErrorSink] = None,
        max_workers: int = 8,
    ):
        self.account = parse_board_url(board_url)
        self.fetch = fetch
        self.sink = sink or LoggingErrorSink()
        self.max_workers = max_workers

    def fetch_jobs(self) -> List[JobPosting]:
        url = f"{API_BASE}/{self.account}?mode=json"
        response = self.fetch(url, headers={"Accept": "application/json"})
        if not 200 <= response.status_code < 300:
            raise FetchError(PROVIDER, self.account, response.status_code)

        data = response.json()
        if not isinstance(data, list):
            return []

        jobs = [map_posting(self.account, p) for p in data if isinstance(p, dict)]
        logger.debug("[lever] %s: %d postings listed", self.account, len(jobs))
        return jobs
