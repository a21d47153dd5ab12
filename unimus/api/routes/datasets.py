from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from unimus.api.dependencies.database import get_db_session
from unimus.api.schemas.citation import Citation
from unimus.api.schemas.dataset import (
    DatasetCreateRequest,
    DatasetMetadataResponse,
    DatasetPatchRequest,
    DatasetSearchRequest,
)
from unimus.api.schemas.dataset_file import DatasetFileMetadataResponse
from unimus.config import Settings, get_settings
from unimus.models import Dataset, DatasetFile
from unimus.services import workflow
from unimus.services.citation import generate_citation
from unimus.services.dataset_files import list_dataset_files

router = APIRouter(prefix="/datasets")


@router.post("", response_model=DatasetMetadataResponse)
async def create_dataset(
    dataset: DatasetCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> Dataset:
    return await workflow.create_dataset(db, dataset)


@router.get("", response_model=list[DatasetMetadataResponse])
async def list_datasets(
    search: Annotated[DatasetSearchRequest, Query()],
    db: AsyncSession = Depends(get_db_session),
) -> list[Dataset]:
    """Fetch datasets, newest first. Accepts the same parameters as /datasets/search."""
    return await workflow.list_datasets(db, search)


@router.get("/search", response_model=list[DatasetMetadataResponse])
async def search_datasets(
    search: Annotated[DatasetSearchRequest, Query()],
    db: AsyncSession = Depends(get_db_session),
) -> list[Dataset]:
    return await workflow.search_datasets(db, search)


@router.get("/{dataset_id}", response_model=DatasetMetadataResponse | None)
async def get_dataset(
    dataset_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Dataset | None:
    return await workflow.get_dataset(db, dataset_id)


@router.patch(
    "/{dataset_id}",
    status_code=status.HTTP_200_OK,
    response_model=DatasetMetadataResponse,
)
async def update_dataset(
    dataset_id: int,
    patch: DatasetPatchRequest,
    db: AsyncSession = Depends(get_db_session),
) -> Dataset:
    return await workflow.update_dataset(db, dataset_id, patch)


@router.get("/{dataset_id}/citation", response_model=Citation)
async def get_citation(
    dataset_id: int,
    db: AsyncSession = Depends(get_db_session),
    settings: Settings = Depends(get_settings),
) -> Citation:
    dataset: Dataset | None = await workflow.get_dataset(db, dataset_id)
    if dataset is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Dataset with id {dataset_id} not found",
        )
    return generate_citation(
        dataset, dataset.contributor, repository_name=settings.REPOSITORY_NAME
    )


@router.get("/{dataset_id}/files", response_model=list[DatasetFileMetadataResponse])
async def get_dataset_files(
    dataset_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> list[DatasetFile]:
    return await list_dataset_files(db, dataset_id)
