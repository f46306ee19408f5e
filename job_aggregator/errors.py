# job_aggregator/errors.py
from __future__ import annotations

from dataclasses import dataclass


class JobAggregatorError(Exception):
    """Base exception for configuration, query and upstream failures."""


class ConfigurationError(JobAggregatorError):
    """Raised when a source cannot be resolved (bad board URL, unknown provider)."""


class QueryValidationError(ConfigurationError):
    """Raised when the caller's search query is malformed."""


@dataclass(slots=True, eq=False)
class FetchError(JobAggregatorError):
    """Raised when a provider listing endpoint answers with a non-2xx status."""

    provider: str
    org: str
    status: int

    def __str__(self) -> str:
        return f"{self.provider} {self.org} responded {self.status}"
