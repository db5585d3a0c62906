"""
Read queries over job_postings.

Listing: filters -> WHERE, sort order -> ORDER BY, page/limit -> OFFSET/LIMIT,
plus a COUNT(*) under the same WHERE. Rows with equal sort keys come back in
whatever order the database picks; no tie-break is applied.
"""

import math
from dataclasses import dataclass
from typing import List

from sqlalchemy import and_, case, distinct, func, or_, select
from sqlalchemy.orm import Session

from .database import JobPosting
from .schema import JobFilters, ListingParams, SortOrder


@dataclass(frozen=True)
class JobPage:
    postings: List[JobPosting]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


@dataclass(frozen=True)
class JobStatistics:
    total_jobs: int
    urgent_jobs: int
    new_jobs: int
    ministries: int


def build_conditions(filters: JobFilters) -> list:
    """Translate filters into SQLAlchemy predicates (to be AND-ed)."""
    conditions = []
    if filters.search is not None:
        conditions.append(
            or_(
                JobPosting.title.icontains(filters.search, autoescape=True),
                JobPosting.ministry.icontains(filters.search, autoescape=True),
                JobPosting.job_type.icontains(filters.search, autoescape=True),
            )
        )
    if filters.ministry is not None:
        conditions.append(JobPosting.ministry == filters.ministry)
    return conditions


def order_clause(sort_by: SortOrder):
    if sort_by is SortOrder.DEADLINE:
        return JobPosting.application_period_end.asc()
    if sort_by is SortOrder.MINISTRY:
        return JobPosting.ministry.asc()
    return JobPosting.created_at.desc()


def fetch_job_page(session: Session, params: ListingParams) -> JobPage:
    """
    Run the page query and the count query, one after the other.

    Args:
        session: Open database session
        params: Normalized listing parameters

    Returns:
        JobPage with the matching postings and the unpaginated total
    """
    conditions = build_conditions(params.filters)

    jobs_query = (
        select(JobPosting)
        .order_by(order_clause(params.sort_by))
        .limit(params.limit)
        .offset(params.offset)
    )
    count_query = select(func.count()).select_from(JobPosting)

    if conditions:
        where_clause = and_(*conditions)
        jobs_query = jobs_query.where(where_clause)
        count_query = count_query.where(where_clause)

    postings = list(session.scalars(jobs_query).all())
    total = session.scalar(count_query) or 0

    return JobPage(postings=postings, page=params.page, limit=params.limit, total=int(total))


def fetch_statistics(session: Session) -> JobStatistics:
    """Aggregate counts over every posting in one query."""
    stmt = select(
        func.count().label("total_jobs"),
        func.count(case((JobPosting.is_urgent.is_(True), 1))).label("urgent_jobs"),
        func.count(case((JobPosting.is_new.is_(True), 1))).label("new_jobs"),
        func.count(distinct(JobPosting.ministry)).label("ministries"),
    ).select_from(JobPosting)

    row = session.execute(stmt).one()
    return JobStatistics(
        total_jobs=int(row.total_jobs or 0),
        urgent_jobs=int(row.urgent_jobs or 0),
        new_jobs=int(row.new_jobs or 0),
        ministries=int(row.ministries or 0),
    )
