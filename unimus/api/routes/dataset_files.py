from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from unimus.api.dependencies.database import get_db_session
from unimus.api.schemas.dataset_file import (
    DatasetFileCreateRequest,
    DatasetFileMetadataResponse,
    DatasetPreview,
)
from unimus.config import Settings, get_settings
from unimus.models import DatasetFile
from unimus.services import dataset_files as file_service
from unimus.services.preview import preview_dataset_file

router = APIRouter(prefix="/files")


@router.post("", response_model=DatasetFileMetadataResponse)
async def create_dataset_file(
    dataset_file: DatasetFileCreateRequest,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> DatasetFile:
    """Record a file that has already been written under UPLOAD_DIR."""
    return await file_service.create_dataset_file(db, dataset_file, settings)


@router.get("/{file_id}/preview", response_model=DatasetPreview | None)
async def get_preview(
    file_id: int,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> DatasetPreview | None:
    """Preview the first rows of a file, or null if it can't be read or parsed."""
    dataset_file = await file_service.get_dataset_file(db, file_id)
    if dataset_file is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Dataset file with id {file_id} not found",
        )
    return await preview_dataset_file(dataset_file, settings)
