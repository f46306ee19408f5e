# job_aggregator/sources/ashby.py
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

PROVIDER = "ashby"
API_BASE = "https://jobs.ashbyhq.com/api/posting"

_REMOTE_RE = re.compile(r"remote|anywhere|global", re.IGNORECASE)


def parse_board_url(board_url: str) -> str:
    """https://jobs.ashbyhq.com/acme -> 'acme' (first path segment)."""
    u = urlparse(safe_str(board_url))
    host = (u.hostname or "").lower()
    if not host.endswith("ashbyhq.com"):
        raise ConfigurationError(f"Invalid Ashby URL: {board_url!r} (not an Ashby board)")
    segs = [s for s in u.path.split("/") if s]
    if not segs:
        raise ConfigurationError(f"Invalid Ashby URL: {board_url!r} (missing org slug)")
    return segs[0]


def fallback_url(org: str, job_id: str) -> str:
    return f"https://jobs.ashbyhq.com/{org}/job/{job_id}"


def normalize_list(data: Any) -> List[Any]:
    """The posting list sits at the top level, or under jobs / postings / data.postings."""
    if isinstance(data, list):
        return data
    if not isinstance(data, dict):
        return []
    for key in ("jobs", "postings"):
        if isinstance(data.get(key), list):
            return data[key]
    nested = data.get("data")
    if isinstance(nested, dict) and isinstance(nested.get("postings"), list):
        return nested["postings"]
    return []


def pick_location(p: Dict[str, Any]) -> str:
    loc = p.get("location")
    if isinstance(loc, str):
        return loc.strip()

    locations = p.get("locations")
    if isinstance(locations, list) and locations:
        names = []
        for x in locations:
            name = safe_str(x.get("name")) if isinstance(x, dict) else safe_str(x)
            if name:
                names.append(name)
        return ", ".join(names)

    primary = p.get("primaryLocation")
    if isinstance(primary, dict) and safe_str(primary.get("name")):
        return safe_str(primary.get("name"))
    return ""


def _raw_id(org: str, p: Dict[str, Any]) -> str:
    for key in ("id", "jobId", "_id"):
        value = p.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return stable_fallback_id(org, safe_str(p.get("title")), safe_str(p.get("jobUrl")))


def _posted(p: Dict[str, Any]) -> Optional[str]:
    return to_iso(p.get("createdAt") or p.get("publishedAt") or p.get("updatedAt"))


def map_posting(org: str, p: Dict[str, Any]) -> JobPosting:
    raw_id = _raw_id(org, p)
    title = safe_str(p.get("title")) or "Untitled"
    location = pick_location(p)
    work_type = safe_str(p.get("workType")) or safe_str(p.get("workplaceType"))
    employment_type = safe_str(p.get("employmentType"))

    remote_blob = " ".join(x for x in (location, work_type, employment_type, title) if x)
    remote = p.get("isRemote") is True or bool(_REMOTE_RE.search(remote_blob))

    return JobPosting(
        id=posting_id(PROVIDER, org, raw_id),
        provider=PROVIDER,
        company=safe_str(p.get("companyName")) or org,
        title=title,
        location=location,
        remote=remote,
        url=safe_str(p.get("jobUrl")) or safe_str(p.get("url")) or fallback_url(org, raw_id),
        posted_at=_posted(p),
        description_html=safe_str(p.get("descriptionHtml")) or safe_str(p.get("description")),
        tags=extract_tags(
            title,
            location,
            safe_str(p.get("department")),
            safe_str(p.get("team")),
            employment_type,
        ),
    )


def merge_detail(org: str, job: JobPosting, detail: Dict[str, Any]) -> JobPosting:
    raw_id = job.id.rsplit(":", 1)[-1]
    update: Dict[str, Any] = {}
    description = safe_str(detail.get("descriptionHtml")) or safe_str(detail.get("description"))
    if description:
        update["description_html"] = description
    if not job.location:
        location = pick_location(detail)
        if location:
            update["location"] = location
    if not job.url or job.url == fallback_url(org, raw_id):
        url = safe_str(detail.get("jobUrl"))
        if url:
            update["url"] = url
    if job.posted_at is None:
        posted = _posted(detail)
        if posted:
            update["posted_at"] = posted
    return job.model_copy(update=update) if update else job


class AshbySource:
    """
    Ashby's board UI JSON:
      https://jobs.ashbyhq.com/api/posting/{org}
    Some boards omit descriptions in the list; those postings are looked up
    one by one at /api/posting/{org}/{id}.
    """

    provider = PROVIDER

    def __init__(
        self,
        board_url: str,
        fetch: Fetch = fetch_with_retry,
        sink: Optional[ErrorSink] = None,
        max_workers: int = 8,
    ):
        self.org = parse_board_url(board_url)
        self.fetch = fetch
        self.sink = sink or LoggingErrorSink()
        self.max_workers = max_workers

    def _get_json(self, url: str) -> Any:
        response = self.fetch(url, headers={"Accept": "application/json"})
        if not 200 <= response.status_code < 300:
            raise FetchError(PROVIDER, self.org, response.status_code)
        return response.json()

    def fetch_detail(self, job: JobPosting) -> Dict[str, Any]:
        raw_id = job.id.rsplit(":", 1)[-1]
        data = self._get_json(f"{API_BASE}/{self.org}/{raw_id}")
        return data if isinstance(data, dict) else {}

    def fetch_jobs(self) -> List[JobPosting]:
        postings = normalize_list(self._get_json(f"{API_BASE}/{self.org}"))
        jobs = [map_posting(self.org, p) for p in postings if isinstance(p, dict)]
        logger.debug("[ashby] %s: %d postings listed", self.org, len(jobs))

        return enrich_missing_details(
            jobs,
            lookup=self.fetch_detail,
            merge=lambda job, detail: merge_detail(self.org, job, detail),
            sink=self.sink,
            context="ashby-detail",
            max_workers=self.max_workers,
        )
