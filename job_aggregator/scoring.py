# job_aggregator/scoring.py
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional

from job_aggregator.models import Filters, JobPosting
from job_aggregator.utils import parse_iso


KEYWORD_TITLE_WEIGHT = 6
KEYWORD_DESCRIPTION_WEIGHT = 2
TECH_TITLE_WEIGHT = 4
TECH_DESCRIPTION_WEIGHT = 2
REMOTE_BONUS = 1
TARGET_LOCATION_BONUS = 1
LOW_YEARS_BONUS = 3
LOW_YEARS_MAX = 2
ENTRY_LEVEL_BONUS = 2
RECENCY_MAX_BONUS = 6
RECENCY_STEP_DAYS = 3

ENTRY_LEVEL_SENIORITY = ("intern", "junior")
TARGET_LOCATIONS_RE = re.compile(r"pakistan|islamabad|lahore|karachi")


@dataclass
class ScoreBreakdown:
    total: int
    components: Dict[str, int] = field(default_factory=dict)


def recency_bonus(posted_at: Optional[str], now: datetime) -> int:
    """6 points when fresh, one point less every 3 days, never negative."""
    posted = parse_iso(posted_at)
    if posted is None:
        return 0
    days = max(0.0, (now - posted).total_seconds() / 86400)
    return max(0, RECENCY_MAX_BONUS - int(days // RECENCY_STEP_DAYS))


def score_job(job: JobPosting, filters: Filters, now: Optional[datetime] = None) -> ScoreBreakdown:
    now = now or datetime.now(timezone.utc)
    title = job.title.lower()
    desc = (job.description_html or "").lower()
    loc = (job.location or "").lower()

    keyword = 0
    for k in filters.keywords:
        if k in title:
            keyword += KEYWORD_TITLE_WEIGHT
        if k in desc:
            keyword += KEYWORD_DESCRIPTION_WEIGHT

    tech = 0
    for t in filters.tech:
        if t in title:
            tech += TECH_TITLE_WEIGHT
        if t in desc:
            tech += TECH_DESCRIPTION_WEIGHT

    req = job.requirements
    min_years = req.min_years if req is not None else None
    seniority = req.seniority if req is not None else None

    components = {
        "keyword": keyword,
        "tech": tech,
        "remote": REMOTE_BONUS if job.remote else 0,
        "location": TARGET_LOCATION_BONUS if TARGET_LOCATIONS_RE.search(loc) else 0,
        "experience": LOW_YEARS_BONUS if min_years is not None and min_years <= LOW_YEARS_MAX else 0,
        "seniority": ENTRY_LEVEL_BONUS if seniority in ENTRY_LEVEL_SENIORITY else 0,
        "recency": recency_bonus(job.posted_at, now),
    }
    return ScoreBreakdown(total=sum(components.values()), components=components)


def rank_jobs(jobs: List[JobPosting], filters: Filters, now: Optional[datetime] = None) -> List[JobPosting]:
    """Descending by score; ties keep input order (sorted() is stable)."""
    now = now or datetime.now(timezone.utc)
    scored = [(score_job(j, filters, now).total, j) for j in jobs]
    scored.sort(key=lambda x: x[0], reverse=True)
    return [j for _, j in scored]
