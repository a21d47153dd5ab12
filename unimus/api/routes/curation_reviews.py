from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from unimus.api.dependencies.database import get_db_session
from unimus.api.schemas.curation_review import (
    CurationReviewCreateRequest,
    CurationReviewDetailsResponse,
    CurationReviewFilter,
    CurationReviewMetadataResponse,
)
from unimus.models import CurationReview
from unimus.services import workflow

router = APIRouter(prefix="/curation-reviews")


@router.post("", response_model=CurationReviewMetadataResponse)
async def create_curation_review(
    review: CurationReviewCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> CurationReview:
    """File a review; approvals and rejections move the dataset's status."""
    return await workflow.create_curation_review(db, review)


@router.get("", response_model=list[CurationReviewDetailsResponse])
async def list_curation_reviews(
    filters: Annotated[CurationReviewFilter, Query()],
    db: AsyncSession = Depends(get_db_session),
):
    return await workflow.list_curation_reviews(db, filters)
