# job_aggregator/api.py
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from job_aggregator.config import Settings
from job_aggregator.engine import run_search
from job_aggregator.errors import ConfigurationError, QueryValidationError
from job_aggregator.fetcher import Fetch
from job_aggregator.models import Filters, SearchFailure
from job_aggregator.observability import ErrorSink
from job_aggregator.sources import resolve_org

logger = logging.getLogger(__name__)

SERVICE_NAME = "job-aggregator"

Query = Union[Mapping[str, Any], str, bytes]


def _load_query(query: Query) -> Mapping[str, Any]:
    if isinstance(query, (str, bytes)):
        if not query.strip():
            raise QueryValidationError("Empty query")
        try:
            query = json.loads(query)
        except ValueError as e:
            raise QueryValidationError(f"Query is not valid JSON: {e}") from e
    if not isinstance(query, Mapping):
        raise QueryValidationError("Query must be a JSON object")
    return query


def _describe(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "Invalid query: " + "; ".join(parts)


def parse_filters(query: Query, settings: Optional[Settings] = None) -> Filters:
    """Build and validate the Filters entity from caller input."""
    settings = settings or Settings()
    data = _load_query(query)
    try:
        filters = Filters.model_validate(data)
    except ValidationError as e:
        raise QueryValidationError(_describe(e)) from e

    max_sources = settings.search.max_sources
    if not filters.sources:
        raise QueryValidationError("No sources provided")
    if len(filters.sources) > max_sources:
        raise QueryValidationError(f"Too many sources (max {max_sources})")

    for src in filters.sources:
        resolve_org(src.type, src.url)
    return filters


def search(
    query: Query,
    *,
    settings: Optional[Settings] = None,
    fetch: Optional[Fetch] = None,
    sink: Optional[ErrorSink] = None,
    now: Optional[datetime] = None,
) -> Tuple[int, Dict[str, Any]]:
    """Returns (http_status, payload). Never raises: 400 for bad queries, 500 otherwise."""
    settings = settings or Settings()
    try:
        filters = parse_filters(query, settings)
        page = run_search(filters, settings=settings, fetch=fetch, sink=sink, now=now)
    except ConfigurationError as e:
        logger.info("Rejected query: %s", e)
        return 400, SearchFailure(error=str(e)).model_dump(by_alias=True)
    except Exception:
        logger.exception("Search failed")
        return 500, SearchFailure(error="Internal error").model_dump(by_alias=True)

    return 200, page.model_dump(by_alias=True)


def health(now: Optional[datetime] = None) -> Dict[str, Any]:
    now = now or datetime.now(timezone.utc)
    return {"ok": True, "service": SERVICE_NAME, "time": now.isoformat()}
