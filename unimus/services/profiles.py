from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from unimus.api.schemas.profile import ProfileCreateRequest
from unimus.errors import Conflict, NotFound
from unimus.models import Profile, User

logger = get_logger(__name__)


async def create_profile(db: AsyncSession, profile_in: ProfileCreateRequest) -> Profile:
    log = logger.bind(user_id=profile_in.user_id)
    if await User.get(db, id=profile_in.user_id) is None:
        raise NotFound(f"User with id {profile_in.user_id} does not exist")

    already_exists = f"User with id {profile_in.user_id} already has a profile"
    if await Profile.get(db, user_id=profile_in.user_id) is not None:
        raise Conflict(already_exists)

    profile = Profile(**profile_in.model_dump())
    try:
        await profile._asave(db)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        log.info("Lost race creating profile")
        raise Conflict(already_exists) from e

    log.info("Created profile", profile_id=profile.id, type=profile.type.value)
    return profile


async def list_profiles(db: AsyncSession) -> list[Profile]:
    """All profiles, each with its user loaded."""
    result = await db.scalars(select(Profile).order_by(Profile.id))
    return list(result.all())


async def get_profile_by_user(db: AsyncSession, user_id: int) -> Profile | None:
    return await Profile.get(db, user_id=user_id)
