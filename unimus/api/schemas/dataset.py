from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, Field

from unimus.models.enums import AccessLevel, DatasetStatus

from .base import BaseSchema, PatchSchema

MIN_PUBLICATION_YEAR = 1900


def _not_too_far_ahead(year: int) -> int:
    # evaluated per request so the bound moves with the calendar
    max_year = datetime.now().year + 10
    if year > max_year:
        raise ValueError(f"publication_year must be at most {max_year}")
    return year


PublicationYear = Annotated[
    int, Field(ge=MIN_PUBLICATION_YEAR), AfterValidator(_not_too_far_ahead)
]
NonEmptyStr = Annotated[str, Field(min_length=1)]


class DatasetMetadata(BaseSchema):
    title: NonEmptyStr
    description: NonEmptyStr
    domain: NonEmptyStr
    task: NonEmptyStr
    license: NonEmptyStr
    doi: str | None = None
    access_level: AccessLevel
    status: DatasetStatus = DatasetStatus.DRAFT
    contributor_id: int
    publication_year: PublicationYear


class DatasetCreateRequest(DatasetMetadata):
    pass


class DatasetMetadataResponse(DatasetMetadata):
    id: int
    # stored rows are never re-validated against the input bounds
    publication_year: int
    created_at: datetime
    updated_at: datetime


class DatasetPatchRequest(PatchSchema):
    title: NonEmptyStr = None
    description: NonEmptyStr = None
    domain: NonEmptyStr = None
    task: NonEmptyStr = None
    license: NonEmptyStr = None
    doi: str | None = None
    access_level: AccessLevel = None
    # direct overwrite, bypasses the review-driven transitions
    status: DatasetStatus = None
    contributor_id: int = None
    publication_year: PublicationYear = None


class DatasetSearchRequest(BaseSchema):
    query: str | None = None
    domain: str | None = None
    task: str | None = None
    publication_year: int | None = None
    access_level: AccessLevel | None = None
    status: DatasetStatus | None = None
    limit: int = Field(default=20, gt=0, le=100)
    offset: int = Field(default=0, ge=0)
