"""Dataset curation workflow.

A dataset moves draft -> review -> approved -> published. Curation reviews
drive the review/draft/approved part of that:

    approved review   review -> approved (any other status is left alone)
    rejected review   anything -> draft
    pending review    no change

`published` is only ever reached through an explicit `update_dataset`.
"""

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from unimus.api.schemas.curation_review import (
    CurationReviewCreateRequest,
    CurationReviewFilter,
)
from unimus.api.schemas.dataset import (
    DatasetCreateRequest,
    DatasetPatchRequest,
    DatasetSearchRequest,
)
from unimus.errors import Conflict, NotFound, PermissionDenied
from unimus.models import (
    CONTRIBUTING_ROLES,
    CURATING_ROLES,
    CurationReview,
    Dataset,
    DatasetStatus,
    ReviewStatus,
    User,
)
from unimus.models.base import utcnow

logger = get_logger(__name__)


def next_status(current: DatasetStatus, review: ReviewStatus) -> DatasetStatus:
    """The dataset status after a review with the given outcome is filed."""
    if review == ReviewStatus.APPROVED and current == DatasetStatus.REVIEW:
        return DatasetStatus.APPROVED
    if review == ReviewStatus.REJECTED:
        return DatasetStatus.DRAFT
    return current


async def create_dataset(db: AsyncSession, dataset_in: DatasetCreateRequest) -> Dataset:
    log = logger.bind(contributor_id=dataset_in.contributor_id)
    contributor: User | None = await User.get(db, id=dataset_in.contributor_id)
    if contributor is None:
        raise NotFound("Contributor not found")
    if contributor.role not in CONTRIBUTING_ROLES:
        log.info("Rejected dataset creation", role=contributor.role.value)
        raise PermissionDenied(
            f"User with role {contributor.role.value} does not have permission to create datasets"
        )

    dataset = Dataset(**dataset_in.model_dump())
    await dataset._asave(db)
    await db.commit()

    log.info("Created dataset", dataset_id=dataset.id, status=dataset.status.value)
    return dataset


async def get_dataset(db: AsyncSession, dataset_id: int) -> Dataset | None:
    return await Dataset.get(db, id=dataset_id)


async def update_dataset(
    db: AsyncSession, dataset_id: int, patch: DatasetPatchRequest
) -> Dataset:
    log = logger.bind(dataset_id=dataset_id)
    dataset: Dataset | None = await Dataset.get(db, id=dataset_id)
    if dataset is None:
        raise NotFound(f"Dataset with id {dataset_id} not found")

    changes = patch.to_patch()
    contributor_id = changes.get("contributor_id")
    if contributor_id is not None and contributor_id != dataset.contributor_id:
        if await User.get(db, id=contributor_id) is None:
            raise NotFound(f"User with id {contributor_id} not found")

    previous_status = dataset.status
    dataset.apply_patch(changes)
    await db.commit()

    if dataset.status != previous_status:
        log.info(
            "Dataset status overwritten",
            from_status=previous_status.value,
            to_status=dataset.status.value,
        )
    log.info("Updated dataset", fields=sorted(changes))
    return dataset


async def search_datasets(
    db: AsyncSession, search: DatasetSearchRequest
) -> list[Dataset]:
    """Case-insensitive text match plus exact filters, newest first."""
    stmt = select(Dataset)

    if search.query and search.query.strip():
        pattern = f"%{search.query.strip()}%"
        stmt = stmt.where(
            or_(
                Dataset.title.ilike(pattern),
                Dataset.description.ilike(pattern),
                Dataset.domain.ilike(pattern),
                Dataset.task.ilike(pattern),
            )
        )

    if search.domain is not None:
        stmt = stmt.where(Dataset.domain == search.domain)

    if search.task is not None:
        stmt = stmt.where(Dataset.task == search.task)

    if search.publication_year is not None:
        stmt = stmt.where(Dataset.publication_year == search.publication_year)

    if search.access_level is not None:
        stmt = stmt.where(Dataset.access_level == search.access_level)

    if search.status is not None:
        stmt = stmt.where(Dataset.status == search.status)

    stmt = (
        stmt.order_by(Dataset.created_at.desc(), Dataset.id.desc())
        .limit(search.limit)
        .offset(search.offset)
    )
    result = await db.scalars(stmt)
    return list(result.all())


async def list_datasets(
    db: AsyncSession, search: DatasetSearchRequest | None = None
) -> list[Dataset]:
    return await search_datasets(db, search or DatasetSearchRequest())


async def list_datasets_by_contributor(
    db: AsyncSession, contributor_id: int
) -> list[Dataset]:
    result = await db.scalars(
        select(Dataset)
        .where(Dataset.contributor_id == contributor_id)
        .order_by(Dataset.created_at.desc(), Dataset.id.desc())
    )
    return list(result.all())


async def create_curation_review(
    db: AsyncSession, review_in: CurationReviewCreateRequest
) -> CurationReview:
    """File a review and apply its status transition in one transaction."""
    log = logger.bind(
        dataset_id=review_in.dataset_id, reviewer_id=review_in.reviewer_id
    )

    reviewer: User | None = await User.get(db, id=review_in.reviewer_id)
    if reviewer is None:
        raise NotFound("Reviewer not found")
    if reviewer.role not in CURATING_ROLES:
        log.info("Rejected curation review", role=reviewer.role.value)
        raise PermissionDenied(
            f"User with role {reviewer.role.value} does not have curator permissions"
        )

    dataset: Dataset | None = await Dataset.get(db, id=review_in.dataset_id)
    if dataset is None:
        raise NotFound("Dataset not found")

    already_reviewed = (
        f"Review already exists for dataset {review_in.dataset_id} "
        f"by reviewer {review_in.reviewer_id}"
    )
    existing = await CurationReview.get(
        db, dataset_id=review_in.dataset_id, reviewer_id=review_in.reviewer_id
    )
    if existing is not None:
        raise Conflict(already_reviewed)

    review = CurationReview(**review_in.model_dump(exclude={"reviewed_at"}))
    review.reviewed_at = review_in.reviewed_at or utcnow()

    previous_status = dataset.status
    new_status = next_status(previous_status, review_in.status)
    if new_status != previous_status:
        dataset.apply_patch({"status": new_status})

    try:
        await review._asave(db)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        log.info("Lost race filing curation review")
        raise Conflict(already_reviewed) from e

    log.info(
        "Filed curation review",
        review_id=review.id,
        review_status=review.status.value,
        from_status=previous_status.value,
        to_status=new_status.value,
    )
    return review


async def list_curation_reviews(
    db: AsyncSession, filters: CurationReviewFilter | None = None
) -> list[dict]:
    """Reviews joined with reviewer and dataset details, newest review first."""
    stmt = (
        select(
            CurationReview,
            User.name.label("reviewer_name"),
            User.email.label("reviewer_email"),
            Dataset.title.label("dataset_title"),
        )
        .join(User, CurationReview.reviewer_id == User.id)
        .join(Dataset, CurationReview.dataset_id == Dataset.id)
    )

    if filters is not None:
        if filters.dataset_id is not None:
            stmt = stmt.where(CurationReview.dataset_id == filters.dataset_id)
        if filters.reviewer_id is not None:
            stmt = stmt.where(CurationReview.reviewer_id == filters.reviewer_id)
        if filters.status is not None:
            stmt = stmt.where(CurationReview.status == filters.status)
        if filters.start_date is not None:
            stmt = stmt.where(CurationReview.reviewed_at >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(CurationReview.reviewed_at <= filters.end_date)

    stmt = stmt.order_by(CurationReview.reviewed_at.desc(), CurationReview.id.desc())
    result = await db.execute(stmt)

    return [
        {
            "id": review.id,
            "dataset_id": review.dataset_id,
            "reviewer_id": review.reviewer_id,
            "status": review.status,
            "notes": review.notes,
            "reviewed_at": review.reviewed_at,
            "created_at": review.created_at,
            "reviewer_name": reviewer_name,
            "reviewer_email": reviewer_email,
            "dataset_title": dataset_title,
        }
        for review, reviewer_name, reviewer_email, dataset_title in result.all()
    ]
