from datetime import datetime

from unimus.models.enums import ReviewStatus

from .base import BaseSchema


class CurationReviewBase(BaseSchema):
    dataset_id: int
    reviewer_id: int
    status: ReviewStatus
    notes: str | None = None


class CurationReviewCreateRequest(CurationReviewBase):
    # defaults to the time the review is filed
    reviewed_at: datetime | None = None


class CurationReviewMetadataResponse(CurationReviewBase):
    id: int
    reviewed_at: datetime
    created_at: datetime


class CurationReviewDetailsResponse(CurationReviewMetadataResponse):
    reviewer_name: str | None = None
    reviewer_email: str
    dataset_title: str


class CurationReviewFilter(BaseSchema):
    dataset_id: int | None = None
    reviewer_id: int | None = None
    status: ReviewStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
