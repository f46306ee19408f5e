# job_aggregator/sources/greenhouse.py
from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from job_aggregator.errors import ConfigurationError, FetchError
from job_aggregator.fetcher import Fetch, fetch_with_retry
from job_aggregator.models import JobPosting
from job_aggregator.observability import ErrorSink, LoggingErrorSink
from job_aggregator.sources.details import enrich_missing_details
from job_aggregator.utils import extract_tags, posting_id, safe_str, stable_fallback_id, to_iso

logger = logging.getLogger(__name__)

PROVIDER = "greenhouse"
API_BASE = "https://boards-api.greenhouse.io/v1/boards"

_JOB_ID_RE = re.compile(r"/jobs/(\d+)", re.IGNORECASE)
_REMOTE_RE = re.compile(r"remote", re.IGNORECASE)


def parse_board_url(board_url: str) -> str:
    """https://boards.greenhouse.io/stripe -> 'stripe' (last path segment)."""
    u = urlparse(safe_str(board_url))
    host = (u.hostname or "").lower()
    if not host.endswith("greenhouse.io"):
        raise ConfigurationError(f"Invalid Greenhouse URL: {board_url!r}")
    segs = [s for s in u.path.split("/") if s]
    if not segs:
        raise ConfigurationError(f"Invalid Greenhouse URL: {board_url!r} (missing board slug)")
    return segs[-1]


def fallback_url(slug: str, job_id: str) -> str:
    return f"https://boards.greenhouse.io/{slug}/jobs/{job_id}"


def _raw_id(j: Dict[str, Any], slug: str) -> str:
    jid = j.get("id")
    if jid is not None and str(jid).strip():
        return str(jid).strip()
    url = safe_str(j.get("absolute_url"))
    m = _JOB_ID_RE.search(url)
    if m:
        return m.group(1)
    return stable_fallback_id(slug, safe_str(j.get("title")), url)


def pick_location(j: Dict[str, Any]) -> str:
    loc = j.get("location")
    if isinstance(loc, dict) and safe_str(loc.get("name")):
        return safe_str(loc.get("name"))
    if isinstance(loc, str) and loc.strip():
        return loc.strip()
    offices = j.get("offices")
    if isinstance(offices, list):
        names = [safe_str(o.get("name")) if isinstance(o, dict) else safe_str(o) for o in offices]
        return ", ".join(n for n in names if n)
    return ""


def map_posting(slug: str, j: Dict[str, Any]) -> JobPosting:
    raw_id = _raw_id(j, slug)
    title = safe_str(j.get("title")) or "Untitled"
    location = pick_location(j)
    company = j.get("company")
    company_name = safe_str(company.get("name")) if isinstance(company, dict) else ""

    return JobPosting(
        id=posting_id(PROVIDER, slug, raw_id),
        provider=PROVIDER,
        company=company_name or slug,
        title=title,
        location=location,
        remote=bool(_REMOTE_RE.search(location) or _REMOTE_RE.search(title)),
        url=safe_str(j.get("absolute_url")) or fallback_url(slug, raw_id),
        posted_at=to_iso(j.get("updated_at") or j.get("created_at")),
        description_html=safe_str(j.get("content")),
        tags=extract_tags(title, location),
    )


def merge_detail(slug: str, job: JobPosting, detail: Dict[str, Any]) -> JobPosting:
    raw_id = job.id.rsplit(":", 1)[-1]
    update: Dict[str, Any] = {}
    content = safe_str(detail.get("content"))
    if content:
        update["description_html"] = content
    if not job.location:
        location = pick_location(detail)
        if location:
            update["location"] = location
    if not job.url or job.url == fallback_url(slug, raw_id):
        url = safe_str(detail.get("absolute_url"))
        if url:
            update["url"] = url
    if job.posted_at is None:
        posted = to_iso(detail.get("updated_at") or detail.get("created_at"))
        if posted:
            update["posted_at"] = posted
    return job.model_copy(update=update) if update else job


class GreenhouseSource:
    """
    Public board API:
      https://boards-api.greenhouse.io/v1/boards/{slug}/jobs?content=true
    Postings returned without content get one detail call each.
    """

    provider = PROVIDER

    def __init__(
        self,
        board_url: str,
        fetch: Fetch = fetch_with_retry,
        sink: Optional[ErrorSink] = None,
        max_workers: int = 8,
    ):
        self.slug = parse_board_url(board_url)
        self.fetch = fetch
        self.sink = sink or LoggingErrorSink()
        self.max_workers = max_workers

    def _get_json(self, url: str) -> Any:
        response = self.fetch(url, headers={"Accept": "application/json"})
        if not 200 <= response.status_code < 300:
            raise FetchError(PROVIDER, self.slug, response.status_code)
        return response.json()

    def fetch_detail(self, job: JobPosting) -> Dict[str, Any]:
        raw_id = job.id.rsplit(":", 1)[-1]
        data = self._get_json(f"{API_BASE}/{self.slug}/jobs/{raw_id}")
        return data if isinstance(data, dict) else {}

    def fetch_jobs(self) -> List[JobPosting]:
        data = self._get_json(f"{API_BASE}/{self.slug}/jobs?content=true")
        raw_jobs = data.get("jobs") if isinstance(data, dict) else None
        if not isinstance(raw_jobs, list):
            raw_jobs = []

        jobs = [map_posting(self.slug, j) for j in raw_jobs if isinstance(j, dict)]
        logger.debug("[greenhouse] %s: %d postings listed", self.slug, len(jobs))

        return enrich_missing_details(
            jobs,
            lookup=self.fetch_detail,
            merge=lambda job, detail: merge_detail(self.slug, job, detail),
            sink=self.sink,
            context="greenhouse-detail",
            max_workers=self.max_workers,
        )
