# job_aggregator/sources/details.py
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

from job_aggregator.models import JobPosting
from job_aggregator.observability import ErrorSink, report_safely

logger = logging.getLogger(__name__)

DetailLookup = Callable[[JobPosting], Dict[str, Any]]
DetailMerge = Callable[[JobPosting, Dict[str, Any]], JobPosting]


def enrich_missing_details(
    jobs: List[JobPosting],
    lookup: DetailLookup,
    merge: DetailMerge,
    sink: ErrorSink,
    context: str,
    max_workers: int = 8,
) -> List[JobPosting]:
    """
    One detail lookup per posting with an empty description, run concurrently.
    A failed lookup is reported and the posting is kept as it was.
    Merging happens on the calling thread once every lookup has finished.
    """
    pending = [i for i, j in enumerate(jobs) if not j.description_html]
    if not pending:
        return jobs

    def _lookup(job: JobPosting) -> Optional[Dict[str, Any]]:
        try:
            return lookup(job)
        except Exception as e:
            report_safely(sink, context, job.id, e)
            return None

    workers = max(1, min(max_workers, len(pending)))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=context) as pool:
        details = list(pool.map(_lookup, [jobs[i] for i in pending]))

    out = list(jobs)
    enriched = 0
    for i, detail in zip(pending, details):
        if isinstance(detail, dict):
            out[i] = merge(out[i], detail)
            enriched += 1

    logger.debug("[%s] enriched %d/%d postings", context, enriched, len(pending))
    return out
