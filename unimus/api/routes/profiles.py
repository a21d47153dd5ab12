from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from unimus.api.dependencies.database import get_db_session
from unimus.api.schemas.profile import (
    ProfileCreateRequest,
    ProfileMetadataResponse,
    ProfileWithUserResponse,
)
from unimus.models import Profile
from unimus.services import profiles as profile_service

router = APIRouter(prefix="/profiles")


@router.post("", response_model=ProfileMetadataResponse)
async def create_profile(
    profile: ProfileCreateRequest,
    db: AsyncSession = Depends(get_db_session),
) -> Profile:
    return await profile_service.create_profile(db, profile)


@router.get("", response_model=list[ProfileWithUserResponse])
async def list_profiles(
    db: AsyncSession = Depends(get_db_session),
) -> list[Profile]:
    return await profile_service.list_profiles(db)


@router.get("/by-user/{user_id}", response_model=ProfileMetadataResponse | None)
async def get_profile_by_user(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> Profile | None:
    return await profile_service.get_profile_by_user(db, user_id)
