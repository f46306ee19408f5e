# job_aggregator/fetcher.py
from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 8.0
DEFAULT_RETRIES = 2
DEFAULT_MAX_BACKOFF_S = 5.0

Fetch = Callable[..., requests.Response]


def _retry_after_seconds(response: requests.Response, attempt: int) -> float:
    raw = response.headers.get("Retry-After") or "0"
    try:
        value = int(raw)
    except ValueError:
        value = 0
    return float(value) if value > 0 else (attempt + 1) * 0.8


def fetch_with_retry(
    url: str,
    headers: Optional[Dict[str, str]] = None,
    *,
    retries: int = DEFAULT_RETRIES,
    timeout: float = DEFAULT_TIMEOUT_S,
    max_backoff: float = DEFAULT_MAX_BACKOFF_S,
    session: Optional[requests.Session] = None,
) -> requests.Response:
    """GET with retries on 429, 5xx and network errors. Returns the final response as-is."""
    http = session or requests
    attempt = 0

    while True:
        try:
            response = http.get(url, headers=headers, timeout=timeout)
        except requests.RequestException as e:
            if attempt >= retries:
                logger.error("GET %s failed after %d attempts: %s", url, attempt + 1, e)
                raise
            delay = min((attempt + 1) * 0.5, max_backoff)
            logger.warning(
                "GET %s failed (attempt %d/%d): %s. Retrying in %.1f seconds...",
                url, attempt + 1, retries + 1, e, delay,
            )
            time.sleep(delay)
            attempt += 1
            continue

        if attempt < retries and response.status_code == 429:
            delay = min(_retry_after_seconds(response, attempt), max_backoff)
        elif attempt < retries and response.status_code >= 500:
            delay = min((attempt + 1) * 0.5, max_backoff)
        else:
            return response

        logger.warning(
            "GET %s responded %d (attempt %d/%d). Retrying in %.1f seconds...",
            url, response.status_code, attempt + 1, retries + 1, delay,
        )
        time.sleep(delay)
        attempt += 1
