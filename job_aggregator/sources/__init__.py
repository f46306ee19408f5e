from job_aggregator.errors import ConfigurationError
from job_aggregator.sources import ashby, greenhouse, lever
from job_aggregator.sources.ashby import AshbySource
from job_aggregator.sources.greenhouse import GreenhouseSource
from job_aggregator.sources.lever import LeverSource

SOURCES = {
    "greenhouse": GreenhouseSource,
    "lever": LeverSource,
    "ashby": AshbySource,
}

_URL_PARSERS = {
    "greenhouse": greenhouse.parse_board_url,
    "lever": lever.parse_board_url,
    "ashby": ashby.parse_board_url,
}


def get_source_class(provider: str):
    name = (provider or "").strip().lower()
    if name not in SOURCES:
        raise ConfigurationError(f"Unknown source: {provider}")
    return SOURCES[name]


def resolve_org(provider: str, board_url: str) -> str:
    """Board URL -> provider org identifier, raising ConfigurationError when it cannot be derived."""
    get_source_class(provider)
    return _URL_PARSERS[provider.strip().lower()](board_url)


__all__ = [
    "SOURCES",
    "AshbySource",
    "GreenhouseSource",
    "LeverSource",
    "get_source_class",
    "resolve_org",
]
