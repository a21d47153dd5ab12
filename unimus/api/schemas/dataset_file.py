from datetime import datetime

from pydantic import Field

from .base import BaseSchema, CamelSchema

# a preview cell: typed number, plain text, or null
Cell = str | int | float | None


class DatasetFileBase(BaseSchema):
    dataset_id: int
    filename: str = Field(min_length=1)
    path: str = Field(min_length=1)
    # bounds and the type allow-list are checked by unimus.services.dataset_files
    size: int
    type: str = Field(min_length=1)


class DatasetFileCreateRequest(DatasetFileBase):
    pass


class DatasetFileMetadataResponse(DatasetFileBase):
    id: int
    created_at: datetime


class DatasetPreview(CamelSchema):
    headers: list[str] = Field(default_factory=list)
    rows: list[list[Cell]] = Field(default_factory=list)
    total_rows: int = 0
    file_type: str
