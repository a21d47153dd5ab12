from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from unimus.api.dependencies.database import get_db_session
from unimus.api.schemas.dataset import DatasetMetadataResponse
from unimus.api.schemas.user import (
    LoginRequest,
    UserCreateRequest,
    UserMetadataResponse,
    UserPatchRequest,
)
from unimus.models import Dataset, User
from unimus.services import users as user_service
from unimus.services.workflow import list_datasets_by_contributor

router = APIRouter(prefix="/users")


@router.post("", response_model=UserMetadataResponse)
async def create_user(
    user: UserCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> User:
    return await user_service.create_user(db, user)


@router.get("", status_code=status.HTTP_200_OK, response_model=list[UserMetadataResponse])
async def list_users(
    db: AsyncSession = Depends(get_db_session),
) -> list[User]:
    return await user_service.list_users(db)


@router.post(
    "/authenticate",
    status_code=status.HTTP_200_OK,
    response_model=UserMetadataResponse | None,
)
async def authenticate_user(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> User | None:
    """Return the matching user, or null if the credentials don't match."""
    return await user_service.authenticate_user(
        db, credentials.email, credentials.password
    )


@router.patch(
    "/{user_id}", status_code=status.HTTP_200_OK, response_model=UserMetadataResponse
)
async def update_user(
    user_id: int,
    patch: UserPatchRequest,
    db: AsyncSession = Depends(get_db_session),
) -> User:
    return await user_service.update_user(db, user_id, patch)


@router.get("/{user_id}/datasets", response_model=list[DatasetMetadataResponse])
async def get_datasets_by_contributor(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> list[Dataset]:
    """Fetch a contributor's datasets, newest first."""
    return await list_datasets_by_contributor(db, user_id)
