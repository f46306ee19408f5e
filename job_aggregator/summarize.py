# job_aggregator/summarize.py
from __future__ import annotations

import re
import unicodedata
from typing import List

from job_aggregator.utils import collapse_ws, decode_entities, strip_tags


BULLET = "•"
MAX_ITEM_CHARS = 160
ELLIPSIS = "…"

_li_re = re.compile(r"<li[^>]*>", re.IGNORECASE)
_br_re = re.compile(r"<br\s*/?>", re.IGNORECASE)
_sentence_split_re = re.compile(r"(?<=\.)\s+")
_key_sentence_re = re.compile(r"responsib|require|qualif|skills|experience|you will", re.IGNORECASE)


def safe_truncate(s: str, n: int = MAX_ITEM_CHARS) -> str:
    """Cut to at most n characters (ellipsis included) without orphaning combining marks."""
    if len(s) <= n:
        return s
    cut = n - 1
    while cut > 0 and unicodedata.combining(s[cut]):
        cut -= 1
    return s[:cut].rstrip() + ELLIPSIS


def summarize_html(html: str, max_bullets: int = 5) -> List[str]:
    if not html:
        return []

    # twice: some boards double-encode (&amp;lt;li&amp;gt;)
    decoded = decode_entities(decode_entities(html))

    text = _li_re.sub(f"{BULLET} ", decoded)
    text = _br_re.sub("\n", text)
    text = collapse_ws(strip_tags(text))
    if not text:
        return []

    if BULLET in text:
        # the chunk before the first marker is intro prose, not a bullet
        chunks = text.split(BULLET)[1:]
        bullets = [c.strip() for c in chunks if c.strip()]
        if bullets:
            return [safe_truncate(b) for b in bullets[:max_bullets]]

    sentences = [s for s in _sentence_split_re.split(text) if s.strip()]
    picked = [s for s in sentences if _key_sentence_re.search(s)]
    chosen = picked or sentences
    return [safe_truncate(s) for s in chosen[:max_bullets]]
