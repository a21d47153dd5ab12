import itertools
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from unimus.api.schemas.dataset import DatasetCreateRequest
from unimus.api.schemas.profile import ProfileCreateRequest
from unimus.api.schemas.user import UserCreateRequest
from unimus.models import Dataset, Profile, ProfileType, User, UserRole
from unimus.services.profiles import create_profile
from unimus.services.users import create_user
from unimus.services.workflow import create_dataset

_counter = itertools.count(1)


def unique_email(prefix: str = "user") -> str:
    return f"{prefix}{next(_counter)}@example.com"


def dataset_payload(contributor_id: int, **overrides) -> dict:
    payload = {
        "title": "Machine Learning Dataset",
        "description": "Labelled samples for classification experiments",
        "domain": "Computer Science",
        "task": "Classification",
        "license": "CC-BY-4.0",
        "access_level": "public",
        "contributor_id": contributor_id,
        "publication_year": 2023,
    }
    payload.update(overrides)
    return payload


async def make_user(
    db: AsyncSession,
    role: UserRole = UserRole.CONTRIBUTOR,
    name: str | None = "Test User",
    email: str | None = None,
    password: str = "secret123",
) -> User:
    """Insert a user through the service layer.

    NB: this is not a fixture!
    """
    return await create_user(
        db,
        UserCreateRequest(
            email=email or unique_email(role.value),
            password=password,
            role=role,
            name=name,
        ),
    )


async def make_profile(
    db: AsyncSession,
    user: User,
    type: ProfileType = ProfileType.LECTURER,
    department: str = "Computer Science",
    institution: str = "Unimus University",
) -> Profile:
    return await create_profile(
        db,
        ProfileCreateRequest(
            user_id=user.id,
            type=type,
            institution=institution,
            department=department,
        ),
    )


async def make_dataset(
    db: AsyncSession,
    contributor: User,
    created_at: datetime | None = None,
    **overrides,
) -> Dataset:
    dataset = await create_dataset(
        db, DatasetCreateRequest(**dataset_payload(contributor.id, **overrides))
    )
    if created_at is not None:
        dataset.created_at = created_at
        await db.commit()
    return dataset


async def post_user(client, role: str = "contributor", **overrides) -> dict:
    """POST a new user and return the response body.

    NB: this is not a fixture!
    """
    payload = {
        "email": unique_email(role),
        "password": "secret123",
        "role": role,
        "name": "Test User",
    }
    payload.update(overrides)
    response = await client.post("/users", json=payload)
    assert response.status_code == 200, response.text
    return response.json()


async def post_dataset(client, contributor_id: int, **overrides) -> dict:
    response = await client.post(
        "/datasets", json=dataset_payload(contributor_id, **overrides)
    )
    assert response.status_code == 200, response.text
    return response.json()


async def post_review(
    client, dataset_id: int, reviewer_id: int, status: str = "approved", **overrides
) -> dict:
    payload = {"dataset_id": dataset_id, "reviewer_id": reviewer_id, "status": status}
    payload.update(overrides)
    response = await client.post("/curation-reviews", json=payload)
    assert response.status_code == 200, response.text
    return response.json()
