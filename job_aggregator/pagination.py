# job_aggregator/pagination.py
from __future__ import annotations

from typing import List, Optional

from job_aggregator.config import SearchSettings
from job_aggregator.models import JobPosting, SearchPage


def paginate(
    jobs: List[JobPosting],
    page: Optional[int] = 1,
    page_size: Optional[int] = None,
    settings: Optional[SearchSettings] = None,
) -> SearchPage:
    """
    Slice a ranked list into one page. The reported total is capped at
    settings.max_return; postings beyond the cap are unreachable.
    """
    settings = settings or SearchSettings()
    page = max(1, int(page or 1))
    size = settings.default_page_size if page_size is None else int(page_size)
    size = min(max(settings.min_page_size, size), settings.max_page_size)

    total = min(len(jobs), settings.max_return)
    start = (page - 1) * size
    end = min(start + size, total)
    items = jobs[start:end] if start < total else []

    return SearchPage(count=len(items), page=page, page_size=size, total=total, jobs=items)
