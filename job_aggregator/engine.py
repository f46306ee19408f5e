# job_aggregator/engine.py
from __future__ import annotations

import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Union

from job_aggregator.config import Settings
from job_aggregator.extract import extract_requirements
from job_aggregator.fetcher import Fetch, fetch_with_retry
from job_aggregator.matching import apply_filters, dedupe_jobs
from job_aggregator.models import Filters, JobPosting, SearchPage, SourceInput
from job_aggregator.observability import ErrorSink, LoggingErrorSink, report_safely
from job_aggregator.pagination import paginate
from job_aggregator.scoring import rank_jobs
from job_aggregator.sources import get_source_class
from job_aggregator.summarize import summarize_html

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceOk:
    source: SourceInput
    jobs: List[JobPosting] = field(default_factory=list)


@dataclass(frozen=True)
class SourceFailed:
    source: SourceInput
    error: BaseException


SourceResult = Union[SourceOk, SourceFailed]


def source_label(source: SourceInput) -> str:
    return f"{source.type}:{source.url}"


def build_fetch(settings: Settings) -> Fetch:
    return functools.partial(
        fetch_with_retry,
        retries=settings.fetch.retries,
        timeout=settings.fetch.timeout_seconds,
        max_backoff=settings.fetch.max_backoff_seconds,
    )


def fetch_source(
    source: SourceInput,
    fetch: Fetch,
    sink: ErrorSink,
    max_workers: int = 8,
) -> SourceResult:
    """Run one provider branch; any exception becomes a SourceFailed."""
    try:
        cls = get_source_class(source.type)
        jobs = cls(source.url, fetch=fetch, sink=sink, max_workers=max_workers).fetch_jobs()
    except Exception as e:
        return SourceFailed(source=source, error=e)
    return SourceOk(source=source, jobs=jobs)


def fetch_sources(
    sources: List[SourceInput],
    fetch: Fetch,
    sink: ErrorSink,
    max_workers: int = 8,
) -> List[SourceResult]:
    """Fan out one branch per source; results come back in source order."""
    if not sources:
        return []
    workers = max(1, min(max_workers, len(sources)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="source") as pool:
        return list(pool.map(lambda s: fetch_source(s, fetch, sink, max_workers), sources))


def collect_jobs(results: List[SourceResult], sink: ErrorSink) -> List[JobPosting]:
    jobs: List[JobPosting] = []
    for r in results:
        if isinstance(r, SourceOk):
            jobs.extend(r.jobs)
        else:
            report_safely(sink, "source", source_label(r.source), r.error)
    return jobs


def enrich_jobs(jobs: List[JobPosting]) -> List[JobPosting]:
    """Summary and requirements, both derived from the untouched description."""
    for j in jobs:
        j.summary = summarize_html(j.description_html)
        j.requirements = extract_requirements(j.description_html)
    return jobs


def run_search(
    filters: Filters,
    *,
    settings: Optional[Settings] = None,
    fetch: Optional[Fetch] = None,
    sink: Optional[ErrorSink] = None,
    now: Optional[datetime] = None,
) -> SearchPage:
    """
    High-level entry:
      fan-out -> summarize/extract -> dedupe -> filter -> rank -> paginate
    """
    settings = settings or Settings()
    fetch = fetch or build_fetch(settings)
    sink = sink or LoggingErrorSink()
    now = now or datetime.now(timezone.utc)
    workers = settings.search.max_workers

    results = fetch_sources(filters.sources, fetch, sink, workers)
    jobs = enrich_jobs(collect_jobs(results, sink))

    deduped = dedupe_jobs(jobs)
    filtered = apply_filters(deduped, filters, now)
    ranked = rank_jobs(filtered, filters, now)

    failed = sum(1 for r in results if isinstance(r, SourceFailed))
    logger.info(
        "Search: sources=%d failed=%d fetched=%d deduped=%d matched=%d",
        len(results), failed, len(jobs), len(deduped), len(ranked),
    )

    return paginate(ranked, filters.page, filters.page_size, settings.search)
