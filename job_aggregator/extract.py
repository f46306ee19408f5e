# job_aggregator/extract.py
from __future__ import annotations

import re
from typing import List, Optional, Tuple

from job_aggregator.models import DEGREE_ORDER, Requirements
from job_aggregator.utils import normalize_text


_YEARS_RE = re.compile(r"(\d+)\s*\+?\s*(?:years?|yrs?)[^.]{0,40}?(?:experience|exp)")

# probed in this order; every hit lowers the running minimum
_DEGREE_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\bphd\b|doctorate|doctoral"), "phd"),
    (re.compile(r"\bmaster['’]?s\b|\bms\b|\bmsc\b|\bgraduate\b"), "masters"),
    (re.compile(r"\bbachelor['’]?s\b|\bbs\b|\bba\b|\bbsc\b|\bundergraduate\b"), "bachelors"),
    (re.compile(r"\bno degree\b|\bdegree not required\b|\bhigh school\b|\bhs diploma\b|\bassociate['’]?s\b"), "none"),
]

# first match wins
_SENIORITY_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r"\bprincipal\b"), "principal"),
    (re.compile(r"\bstaff\b"), "staff"),
    (re.compile(r"\bsenior\b"), "senior"),
    (re.compile(r"\blead\b"), "lead"),
    (re.compile(r"\bmid[-\s]?level\b|\bmid\b"), "mid"),
    (re.compile(r"\bjunior\b"), "junior"),
    (re.compile(r"\b(?:intern|internship)\b"), "intern"),
]


def _min_degree(current: Optional[str], found: str) -> str:
    if current is None:
        return found
    return found if DEGREE_ORDER[found] < DEGREE_ORDER[current] else current


def extract_min_years(text: str) -> Optional[int]:
    """Smallest N across every 'N years ... experience' phrase in normalized text."""
    years = [int(m.group(1)) for m in _YEARS_RE.finditer(text)]
    return min(years) if years else None


def extract_degree(text: str) -> Optional[str]:
    """
    Minimum acceptable degree. "PhD or BS" resolves to bachelors: the text
    accepts the lower tier, so the lower tier is the requirement.
    """
    degree: Optional[str] = None
    for pattern, level in _DEGREE_PATTERNS:
        if pattern.search(text):
            degree = _min_degree(degree, level)
    return degree


def extract_seniority(text: str) -> Optional[str]:
    for pattern, level in _SENIORITY_PATTERNS:
        if pattern.search(text):
            return level
    return None


def extract_requirements(html: str) -> Requirements:
    """Best-effort years/degree/seniority signals from a posting body."""
    text = normalize_text(html)
    return Requirements(
        min_years=extract_min_years(text),
        degree=extract_degree(text),
        seniority=extract_seniority(text),
    )
