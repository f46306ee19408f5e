from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


Provider = Literal["greenhouse", "lever", "ashby"]
DegreeLevel = Literal["none", "bachelors", "masters", "phd"]
Seniority = Literal["intern", "junior", "mid", "senior", "staff", "principal", "lead"]

# ordinal lattice used for the degree ceiling
DEGREE_ORDER: Dict[str, int] = {"none": 0, "bachelors": 1, "masters": 2, "phd": 3}


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Requirements(_CamelModel):
    min_years: Optional[int] = None
    degree: Optional[DegreeLevel] = None
    seniority: Optional[Seniority] = None


class JobPosting(_CamelModel):
    """
    Canonical job posting. Every provider shape is mapped into this model;
    everything downstream of the source mappers only sees JobPosting.
    """
    id: str
    provider: Provider
    company: str
    title: str
    location: str = ""
    remote: bool = False
    url: str = ""
    posted_at: Optional[str] = None
    description_html: str = ""
    summary: Optional[List[str]] = None
    requirements: Optional[Requirements] = None
    tags: Optional[List[str]] = None


def _as_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    return [s.strip() for s in str(value).split(",") if s.strip()]


class SourceInput(_CamelModel):
    type: Provider
    url: str
    name: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _lower_type(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v


class Filters(_CamelModel):
    """Search query. Every field is optional; None / empty means no constraint."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    keywords: List[str] = Field(default_factory=list)
    remote: Optional[bool] = None
    locations: List[str] = Field(default_factory=list)
    tech: List[str] = Field(default_factory=list)
    posted_within_days: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    max_years_experience: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    degree_at_most: Optional[DegreeLevel] = None
    seniority_include: List[Seniority] = Field(default_factory=list)
    sources: List[SourceInput] = Field(default_factory=list)
    page: Optional[int] = 1
    page_size: Optional[int] = None

    @field_validator("keywords", "tech", mode="before")
    @classmethod
    def _lower_terms(cls, v: Any) -> List[str]:
        return [s.lower() for s in _as_list(v)]

    @field_validator("locations", mode="before")
    @classmethod
    def _split_locations(cls, v: Any) -> List[str]:
        return _as_list(v)

    @field_validator("seniority_include", mode="before")
    @classmethod
    def _lower_seniority(cls, v: Any) -> List[str]:
        return [s.lower() for s in _as_list(v)]

    @field_validator("degree_at_most", mode="before")
    @classmethod
    def _lower_degree(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        return str(v).strip().lower()


class SearchPage(_CamelModel):
    ok: Literal[True] = True
    count: int
    page: int
    page_size: int
    total: int
    jobs: List[JobPosting] = Field(default_factory=list)


class SearchFailure(_CamelModel):
    ok: Literal[False] = False
    error: str
