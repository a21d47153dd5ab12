"""Aggregate dataset statistics for accreditation reports.

Filters come in two sets. `base_filters` only touches dataset columns and is
used by every statistic. `contributor_join_filters` adds the profile
predicates and is only applied where the query already joins users and
profiles (contributors and departments). Student involvement always restricts
to student profiles, so it takes the base set only.
"""

from sqlalchemy import ColumnElement, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from unimus.api.schemas.report import (
    ContributorCount,
    DatasetReport,
    DepartmentCount,
    ReportFilter,
    StudentInvolvement,
    YearCount,
)
from unimus.models import Dataset, Profile, ProfileType, User

logger = get_logger(__name__)


def base_filters(filters: ReportFilter | None) -> list[ColumnElement[bool]]:
    clauses: list[ColumnElement[bool]] = []
    if filters is None:
        return clauses
    if filters.start_year is not None:
        clauses.append(Dataset.publication_year >= filters.start_year)
    if filters.end_year is not None:
        clauses.append(Dataset.publication_year <= filters.end_year)
    if filters.contributor_id is not None:
        clauses.append(Dataset.contributor_id == filters.contributor_id)
    return clauses


def contributor_join_filters(filters: ReportFilter | None) -> list[ColumnElement[bool]]:
    clauses = base_filters(filters)
    if filters is None:
        return clauses
    if filters.profile_type is not None:
        clauses.append(Profile.type == filters.profile_type)
    if filters.department is not None:
        clauses.append(Profile.department == filters.department)
    return clauses


async def count_datasets(db: AsyncSession, filters: ReportFilter | None) -> int:
    stmt = select(func.count(Dataset.id)).where(*base_filters(filters))
    return await db.scalar(stmt) or 0


async def datasets_by_year(
    db: AsyncSession, filters: ReportFilter | None
) -> list[YearCount]:
    stmt = (
        select(Dataset.publication_year, func.count(Dataset.id))
        .where(*base_filters(filters))
        .group_by(Dataset.publication_year)
        .order_by(Dataset.publication_year)
    )
    result = await db.execute(stmt)
    return [YearCount(year=year, count=count) for year, count in result.all()]


async def datasets_by_contributor(
    db: AsyncSession, filters: ReportFilter | None
) -> list[ContributorCount]:
    count = func.count(Dataset.id).label("count")
    stmt = (
        select(
            Dataset.contributor_id,
            func.coalesce(User.name, User.email).label("contributor_name"),
            count,
        )
        .join(User, Dataset.contributor_id == User.id)
        .outerjoin(Profile, Profile.user_id == User.id)
        .where(*contributor_join_filters(filters))
        .group_by(Dataset.contributor_id, User.name, User.email)
        .order_by(count.desc(), Dataset.contributor_id)
    )
    result = await db.execute(stmt)
    return [
        ContributorCount(contributor_id=contributor_id, contributor_name=name, count=n)
        for contributor_id, name, n in result.all()
    ]


async def student_involvement(
    db: AsyncSession, filters: ReportFilter | None
) -> StudentInvolvement:
    stmt = (
        select(func.count(distinct(User.id)), func.count(Dataset.id))
        .select_from(Dataset)
        .join(User, Dataset.contributor_id == User.id)
        .join(Profile, Profile.user_id == User.id)
        .where(Profile.type == ProfileType.STUDENT, *base_filters(filters))
    )
    contributors, datasets = (await db.execute(stmt)).one()
    return StudentInvolvement(
        student_contributors=contributors or 0,
        total_student_datasets=datasets or 0,
    )


async def department_breakdown(
    db: AsyncSession, filters: ReportFilter | None
) -> list[DepartmentCount]:
    count = func.count(Dataset.id).label("count")
    stmt = (
        select(Profile.department, count)
        .select_from(Dataset)
        .join(User, Dataset.contributor_id == User.id)
        .join(Profile, Profile.user_id == User.id)
        .where(*contributor_join_filters(filters))
        .group_by(Profile.department)
        .order_by(count.desc(), Profile.department)
    )
    result = await db.execute(stmt)
    return [DepartmentCount(department=dept, count=n) for dept, n in result.all()]


async def generate_report(
    db: AsyncSession, filters: ReportFilter | None = None
) -> DatasetReport:
    report = DatasetReport(
        total_datasets=await count_datasets(db, filters),
        datasets_by_year=await datasets_by_year(db, filters),
        datasets_by_contributor=await datasets_by_contributor(db, filters),
        student_involvement=await student_involvement(db, filters),
        department_breakdown=await department_breakdown(db, filters),
    )
    logger.info(
        "Generated report",
        filters=filters.model_dump(exclude_none=True) if filters else {},
        total_datasets=report.total_datasets,
    )
    return report
