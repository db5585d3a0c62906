"""Response models for the HTTP API (camelCase on the wire)."""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class JobPostingOut(CamelModel):
    id: int
    title: str
    ministry: str
    job_type: Optional[str] = None
    location: Optional[str] = None
    url: Optional[str] = None
    application_period_start: Optional[date] = None
    application_period_end: Optional[date] = None
    is_urgent: bool = False
    is_new: bool = False
    created_at: datetime


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class JobListResponse(CamelModel):
    job_postings: List[JobPostingOut]
    pagination: Pagination


class StatisticsResponse(CamelModel):
    total_jobs: int
    urgent_jobs: int
    new_jobs: int
    ministries: int
