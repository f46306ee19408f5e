from datetime import timedelta

import pytest

from job_aggregator.matching import apply_filters, dedupe_jobs, posted_cutoff
from job_aggregator.models import Filters


def test_dedupe_keeps_first_across_providers(make_job):
    first = make_job(provider="lever", company="Acme", title="Data Engineer", location="Berlin")
    dup = make_job(provider="ashby", company="ACME", title="data engineer", location="BERLIN")
    other = make_job(company="Acme", title="Data Engineer", location="Paris")

    out = dedupe_jobs([first, dup, other])

    assert out == [first, other]
    assert out[0].provider == "lever"


def test_dedupe_does_not_merge_fields(make_job):
    first = make_job(title="X", description_html="")
    second = make_job(title="X", description_html="<p>rich</p>")
    assert dedupe_jobs([first, second])[0].description_html == ""


@pytest.mark.parametrize(
    "filters",
    [
        Filters(),
        Filters(keywords=["python"]),
        Filters(remote=True),
        Filters(locations=["berlin"]),
        Filters(degree_at_most="bachelors", max_years_experience=3),
        Filters(seniority_include=["junior"], tech=["go"]),
    ],
)
def test_filters_are_order_preserving_subsets(make_job, filters):
    jobs = [
        make_job(title="Python Developer", remote=True, requirements={"degree": "masters"}),
        make_job(location="Paris", description_html="go and rust", requirements={"min_years": 5}),
        make_job(title="Junior Go Engineer", requirements={"seniority": "junior", "min_years": 1}),
        make_job(location="Remote - Berlin", remote=True, requirements={"seniority": "senior"}),
    ]
    out = apply_filters(jobs, filters)
    positions = [jobs.index(j) for j in out]
    assert positions == sorted(positions)
    assert all(j in jobs for j in out)


def test_remote_tristate(make_job):
    remote = make_job(remote=True)
    onsite = make_job(remote=False)
    assert apply_filters([remote, onsite], Filters(remote=True)) == [remote]
    assert apply_filters([remote, onsite], Filters(remote=False)) == [onsite]
    assert apply_filters([remote, onsite], Filters()) == [remote, onsite]


def test_degree_ceiling_uses_ordinal_and_ignores_unknown(make_job):
    phd = make_job(requirements={"degree": "phd"})
    masters = make_job(requirements={"degree": "masters"})
    unknown = make_job()

    assert apply_filters([phd, masters, unknown], Filters(degree_at_most="masters")) == [masters, unknown]
    assert apply_filters([phd, unknown], Filters(degree_at_most="none")) == [unknown]


def test_years_ceiling_ignores_unknown(make_job):
    five = make_job(requirements={"min_years": 5})
    three = make_job(requirements={"min_years": 3})
    unknown = make_job()
    assert apply_filters([five, three, unknown], Filters(max_years_experience=3)) == [three, unknown]


def test_seniority_allow_list_ignores_unknown(make_job):
    senior = make_job(requirements={"seniority": "senior"})
    junior = make_job(requirements={"seniority": "junior"})
    unknown = make_job()
    out = apply_filters([senior, junior, unknown], Filters(seniority_include=["Junior", "intern"]))
    assert out == [junior, unknown]


def test_posted_age_keeps_unknown_dates(make_job, now):
    fresh = make_job(posted_at=(now - timedelta(days=2)).isoformat())
    stale = make_job(posted_at=(now - timedelta(days=40)).isoformat())
    unknown = make_job(posted_at=None)

    out = apply_filters([fresh, stale, unknown], Filters(posted_within_days=7), now=now)
    assert out == [fresh, unknown]
    assert apply_filters([stale], Filters(posted_within_days=0), now=now) == [stale]


def test_huge_posted_window_keeps_everything(make_job, now):
    old = make_job(posted_at="2001-01-01T00:00:00+00:00")
    assert posted_cutoff(Filters(posted_within_days=1e7), now) is None
    assert apply_filters([old], Filters(posted_within_days=1e7), now=now) == [old]


def test_locations_match_location_field_only(make_job):
    berlin = make_job(location="Berlin, Germany")
    mention = make_job(location="Paris", description_html="travel to Berlin")
    out = apply_filters([berlin, mention], Filters(locations=["berlin", "munich"]))
    assert out == [berlin]


def test_keywords_and_tech_are_or_within_and_across(make_job):
    title_hit = make_job(title="Python Developer")
    desc_hit = make_job(title="Engineer", description_html="<p>We use Django</p>")
    neither = make_job(title="Designer", description_html="Figma")

    assert apply_filters([title_hit, desc_hit, neither], Filters(keywords=["Python", "django"])) == [
        title_hit,
        desc_hit,
    ]
    both = Filters(keywords=["python", "django"], tech=["django"])
    assert apply_filters([title_hit, desc_hit, neither], both) == [desc_hit]
