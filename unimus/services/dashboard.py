from datetime import datetime, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from unimus.api.schemas.dashboard import DashboardStats
from unimus.config import get_settings
from unimus.models import (
    CurationReview,
    Dataset,
    DatasetStatus,
    ReviewStatus,
    User,
    UserRole,
)
from unimus.models.base import utcnow


async def get_dashboard_stats(
    db: AsyncSession, now: datetime | None = None, recent_days: int | None = None
) -> DashboardStats:
    """Snapshot counts for the admin and curator dashboards.

    A dataset is a recent submission if it was created no earlier than
    `recent_days` (default `RECENT_SUBMISSION_DAYS`) before `now`.
    """
    now = now or utcnow()
    if recent_days is None:
        recent_days = get_settings().RECENT_SUBMISSION_DAYS
    since = now - timedelta(days=recent_days)

    count_datasets = func.count(Dataset.id).filter
    dataset_counts = (
        await db.execute(
            select(
                func.count(Dataset.id),
                count_datasets(Dataset.status == DatasetStatus.PUBLISHED),
                count_datasets(Dataset.status == DatasetStatus.REVIEW),
                count_datasets(Dataset.created_at >= since),
            )
        )
    ).one()

    count_users = func.count(User.id).filter
    user_counts = (
        await db.execute(
            select(
                count_users(User.role == UserRole.CONTRIBUTOR),
                count_users(User.role == UserRole.CURATOR),
            )
        )
    ).one()

    pending_reviews = await db.scalar(
        select(func.count(CurationReview.id)).where(
            CurationReview.status == ReviewStatus.PENDING
        )
    )

    total, published, in_review, recent = dataset_counts
    contributors, curators = user_counts
    return DashboardStats(
        total_datasets=total,
        published_datasets=published,
        datasets_in_review=in_review,
        total_contributors=contributors,
        total_curators=curators,
        recent_submissions=recent,
        pending_reviews=pending_reviews or 0,
    )
