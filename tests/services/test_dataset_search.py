from datetime import timedelta

import pytest
import pytest_asyncio

from tests.utils import make_dataset, make_user
from unimus.api.schemas.dataset import DatasetSearchRequest
from unimus.models.base import utcnow
from unimus.services.workflow import get_dataset, list_datasets, search_datasets


@pytest_asyncio.fixture
async def catalog(db):
    contributor = await make_user(db)
    now = utcnow()
    rows = [
        dict(
            title="Iris Flowers",
            domain="Biology",
            task="Classification",
            publication_year=2021,
            access_level="public",
            status="published",
        ),
        dict(
            title="Housing Prices",
            domain="Economics",
            task="Regression",
            publication_year=2022,
            access_level="private",
            status="review",
            description="Sale prices of houses, with a FLOWER garden flag",
        ),
        dict(
            title="Bird Songs",
            domain="Biology",
            task="Clustering",
            publication_year=2022,
            access_level="restricted",
            status="draft",
        ),
    ]
    datasets = []
    for age, fields in enumerate(rows):
        datasets.append(
            await make_dataset(
                db, contributor, created_at=now - timedelta(days=age), **fields
            )
        )
    return datasets


@pytest.mark.asyncio
async def test_search_matches_text_case_insensitively(db, catalog):
    iris, housing, _ = catalog

    results = await search_datasets(db, DatasetSearchRequest(query="  flower "))

    assert [d.id for d in results] == [iris.id, housing.id]


@pytest.mark.asyncio
async def test_search_matches_domain_and_task_text(db, catalog):
    _, _, birds = catalog

    results = await search_datasets(db, DatasetSearchRequest(query="cluster"))

    assert [d.id for d in results] == [birds.id]


@pytest.mark.asyncio
async def test_search_exact_filters(db, catalog):
    iris, housing, birds = catalog

    biology = await search_datasets(db, DatasetSearchRequest(domain="Biology"))
    assert {d.id for d in biology} == {iris.id, birds.id}

    from_2022 = await search_datasets(db, DatasetSearchRequest(publication_year=2022))
    assert {d.id for d in from_2022} == {housing.id, birds.id}

    private = await search_datasets(db, DatasetSearchRequest(access_level="private"))
    assert [d.id for d in private] == [housing.id]

    drafts = await search_datasets(
        db, DatasetSearchRequest(status="draft", task="Clustering")
    )
    assert [d.id for d in drafts] == [birds.id]

    # filters are exact, not substring matches
    assert await search_datasets(db, DatasetSearchRequest(domain="Bio")) == []


@pytest.mark.asyncio
async def test_search_orders_newest_first_and_paginates(db, catalog):
    iris, housing, birds = catalog

    everything = await search_datasets(db, DatasetSearchRequest())
    assert [d.id for d in everything] == [iris.id, housing.id, birds.id]

    page = await search_datasets(db, DatasetSearchRequest(limit=1, offset=1))
    assert [d.id for d in page] == [housing.id]


@pytest.mark.asyncio
async def test_list_datasets_without_search(db, catalog):
    datasets = await list_datasets(db)
    assert len(datasets) == 3


@pytest.mark.asyncio
async def test_get_dataset(db, catalog):
    iris = catalog[0]
    assert (await get_dataset(db, iris.id)).title == "Iris Flowers"
    assert await get_dataset(db, 12345) is None
