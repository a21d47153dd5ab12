from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from unimus.api.schemas.user import UserCreateRequest, UserPatchRequest
from unimus.errors import Conflict, NotFound
from unimus.models import User
from unimus.services.passwords import hash_password, verify_password

logger = get_logger(__name__)


async def create_user(db: AsyncSession, user_in: UserCreateRequest) -> User:
    if await User.get(db, email=user_in.email) is not None:
        raise Conflict("Email already exists")

    data = user_in.model_dump()
    data["password"] = hash_password(user_in.password)
    user = User(**data)
    try:
        await user._asave(db)
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise Conflict("Email already exists") from e

    logger.info("Created user", user_id=user.id, role=user.role.value)
    return user


async def list_users(db: AsyncSession) -> list[User]:
    result = await db.scalars(select(User).order_by(User.id))
    return list(result.all())


async def update_user(db: AsyncSession, user_id: int, patch: UserPatchRequest) -> User:
    log = logger.bind(user_id=user_id)
    user: User | None = await User.get(db, id=user_id)
    if user is None:
        raise NotFound(f"User with id {user_id} not found")

    changes = patch.to_patch()
    new_email = changes.get("email")
    if new_email is not None and new_email != user.email:
        other = await User.get(db, email=new_email)
        if other is not None and other.id != user.id:
            raise Conflict(f"Email {new_email} is already in use")
    if "password" in changes:
        changes["password"] = hash_password(changes["password"])

    user.apply_patch(changes)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        raise Conflict(f"Email {new_email} is already in use") from e

    log.info("Updated user", fields=sorted(changes))
    return user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    """Return the user whose email matches exactly and whose password verifies."""
    user: User | None = await User.get(db, email=email)
    if user is None or not verify_password(password, user.password):
        logger.info("Authentication failed")
        return None
    return user
