# job_aggregator/matching.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from job_aggregator.models import DEGREE_ORDER, Filters, JobPosting
from job_aggregator.utils import parse_iso


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().lower()


# ----------------------------
# Dedupe
# ----------------------------

def _job_dedupe_key(j: JobPosting) -> Tuple[str, str, str]:
    return (_norm(j.company), _norm(j.title), _norm(j.location))


def dedupe_jobs(jobs: List[JobPosting]) -> List[JobPosting]:
    """
    One posting per case-insensitive (company, title, location).
    The first one in input order wins outright; nothing is merged.
    """
    seen = set()
    out: List[JobPosting] = []
    for j in jobs:
        k = _job_dedupe_key(j)
        if k in seen:
            continue
        seen.add(k)
        out.append(j)
    return out


# ----------------------------
# Filters
# ----------------------------

def posted_cutoff(filters: Filters, now: Optional[datetime] = None) -> Optional[datetime]:
    if not filters.posted_within_days:
        return None
    now = now or datetime.now(timezone.utc)
    try:
        return now - timedelta(days=filters.posted_within_days)
    except (OverflowError, ValueError):
        # window reaches past datetime.min, nothing is too old
        return None


def _any_in(terms: List[str], *haystacks: str) -> bool:
    return any(t in h for t in terms for h in haystacks)


def job_matches_filters(
    job: JobPosting,
    filters: Filters,
    cutoff: Optional[datetime] = None,
) -> bool:
    """
    Conjunctive across constraint categories, OR within keywords/locations/tech.
    A posting whose requirement signal is unknown is never excluded by it.
    """
    title = _norm(job.title)
    loc = _norm(job.location)
    hay = " ".join([title, loc, (job.description_html or "").lower()])

    if filters.remote is not None and job.remote != filters.remote:
        return False

    if cutoff is not None and job.posted_at:
        posted = parse_iso(job.posted_at)
        if posted is not None and posted < cutoff:
            return False

    locations = [_norm(x) for x in filters.locations if _norm(x)]
    if locations and not _any_in(locations, loc):
        return False

    if filters.keywords and not _any_in(filters.keywords, title, hay):
        return False

    if filters.tech and not _any_in(filters.tech, title, hay):
        return False

    req = job.requirements

    if filters.degree_at_most and req is not None and req.degree:
        if DEGREE_ORDER[req.degree] > DEGREE_ORDER[filters.degree_at_most]:
            return False

    if filters.max_years_experience is not None and req is not None and req.min_years is not None:
        if req.min_years > filters.max_years_experience:
            return False

    if filters.seniority_include and req is not None and req.seniority:
        if req.seniority not in filters.seniority_include:
            return False

    return True


def apply_filters(
    jobs: List[JobPosting],
    filters: Filters,
    now: Optional[datetime] = None,
) -> List[JobPosting]:
    cutoff = posted_cutoff(filters, now)
    return [j for j in jobs if job_matches_filters(j, filters, cutoff)]
