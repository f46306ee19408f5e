# job_aggregator/utils.py
import hashlib
import re
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Iterable, List, Optional


_ws_re = re.compile(r"\s+")
_tag_re = re.compile(r"<[^>]+>")
_entity_re = re.compile(r"&(lt|gt|amp|quot|#39|nbsp);")
_tag_split_re = re.compile(r"[,\s/]+")

_ENTITIES = {
    "&lt;": "<",
    "&gt;": ">",
    "&amp;": "&",
    "&quot;": '"',
    "&#39;": "'",
    "&nbsp;": " ",
}

MAX_TAGS = 15


def decode_entities(text: str) -> str:
    """Decode the handful of entities ATS boards actually emit (single pass)."""
    if not text:
        return ""
    return _entity_re.sub(lambda m: _ENTITIES.get(m.group(0), m.group(0)), text)


def strip_tags(text: str) -> str:
    return _tag_re.sub(" ", text or "")


def collapse_ws(text: str) -> str:
    return _ws_re.sub(" ", text or "").strip()


def normalize_text(text: str) -> str:
    """Decode, strip markup, collapse whitespace and lowercase."""
    if not text:
        return ""
    return collapse_ws(strip_tags(decode_entities(text))).lower()


def safe_str(x: Any) -> str:
    return x.strip() if isinstance(x, str) else ""


def unique_lower(items: Iterable[str]) -> List[str]:
    out = []
    seen = set()
    for x in items or []:
        if not x:
            continue
        k = x.strip().lower()
        if k and k not in seen:
            seen.add(k)
            out.append(k)
    return out


def extract_tags(*fields: Any) -> List[str]:
    tokens: List[str] = []
    for f in fields:
        if isinstance(f, str) and f:
            tokens.extend(_tag_split_re.split(f))
    return unique_lower(tokens)[:MAX_TAGS]


def posting_id(provider: str, org: str, raw_id: str) -> str:
    return f"{provider}:{org}:{raw_id}"


def stable_fallback_id(*parts: str) -> str:
    blob = "|".join([p for p in parts if p]).encode("utf-8")
    return hashlib.sha1(blob).hexdigest()


def _from_epoch_ms(ms: float) -> Optional[str]:
    try:
        return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat()
    except (OverflowError, OSError, ValueError):
        return None


def to_iso(x: Any) -> Optional[str]:
    """
    Normalize a provider timestamp to an ISO-8601 UTC string.
    Accepts epoch milliseconds (number or digit string), ISO strings
    (with 'Z' or an offset) and RFC 2822 dates. Anything else -> None.
    """
    if x is None or isinstance(x, bool):
        return None
    if isinstance(x, (int, float)):
        if x <= 0:
            return None
        return _from_epoch_ms(float(x))
    if not isinstance(x, str):
        return None

    s = x.strip()
    if not s:
        return None
    if s.isdigit():
        return _from_epoch_ms(float(s)) if int(s) > 0 else None

    dt = parse_iso(s)
    if dt is None:
        try:
            dt = parsedate_to_datetime(s)
        except (TypeError, ValueError, IndexError):
            return None
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc).isoformat()
    except (OverflowError, ValueError):
        return None


def parse_iso(s: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware datetime (naive values are UTC)."""
    if not s:
        return None
    try:
        dt = datetime.fromisoformat(s.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
