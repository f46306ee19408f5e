import itertools
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from job_aggregator.models import JobPosting, Requirements


NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


class FakeFetch:
    """Stands in for fetch_with_retry: routes exact URLs to (status, payload) or an exception."""

    def __init__(self, routes):
        self.routes = dict(routes)
        self.calls = []

    def __call__(self, url, headers=None, **kwargs):
        self.calls.append(url)
        value = self.routes.get(url, (404, {}))
        if isinstance(value, BaseException):
            raise value
        status, payload = value
        return Mock(status_code=status, json=Mock(return_value=payload), headers={})


class RecordingSink:
    def __init__(self):
        self.reports = []

    def report(self, context, identifier, error):
        self.reports.append((context, identifier, error))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def fake_fetch():
    return FakeFetch


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def make_job():
    counter = itertools.count(1)

    def _make(requirements=None, **overrides) -> JobPosting:
        n = next(counter)
        data = {
            "id": f"greenhouse:acme:{n}",
            "provider": "greenhouse",
            "company": "Acme",
            "title": f"Engineer {n}",
            "location": "Berlin",
            "remote": False,
            "url": f"https://boards.greenhouse.io/acme/jobs/{n}",
            "posted_at": None,
            "description_html": "",
        }
        data.update(overrides)
        job = JobPosting(**data)
        job.requirements = Requirements(**(requirements or {}))
        return job

    return _make
