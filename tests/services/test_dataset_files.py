from datetime import timedelta

import pytest

from tests.utils import make_dataset, make_user
from unimus.api.schemas.dataset_file import DatasetFileCreateRequest
from unimus.config import Settings
from unimus.errors import NotFound, ValidationError
from unimus.models.base import utcnow
from unimus.services.dataset_files import (
    create_dataset_file,
    get_dataset_file,
    list_dataset_files,
)

MAX_FILE_SIZE = 100 * 1024 * 1024


def file_request(dataset_id, **overrides):
    payload = {
        "dataset_id": dataset_id,
        "filename": "iris.csv",
        "path": "datasets/1/iris.csv",
        "size": 4096,
        "type": "csv",
    }
    payload.update(overrides)
    return DatasetFileCreateRequest(**payload)


@pytest.fixture
def settings():
    return Settings(MAX_FILE_SIZE=MAX_FILE_SIZE)


@pytest.mark.asyncio
@pytest.mark.parametrize("file_type", ["csv", "JSON", "Arff"])
async def test_create_dataset_file_keeps_declared_type(db, settings, file_type):
    dataset = await make_dataset(db, await make_user(db))

    dataset_file = await create_dataset_file(
        db, file_request(dataset.id, type=file_type), settings
    )

    assert dataset_file.id is not None
    assert dataset_file.type == file_type


@pytest.mark.asyncio
async def test_create_dataset_file_rejects_type(db, settings):
    dataset = await make_dataset(db, await make_user(db))

    with pytest.raises(ValidationError) as excinfo:
        await create_dataset_file(db, file_request(dataset.id, type="xlsx"), settings)

    assert excinfo.value.detail == (
        "Invalid file type: xlsx. Allowed types: csv, json, arff"
    )


@pytest.mark.asyncio
async def test_create_dataset_file_size_bounds(db, settings):
    dataset = await make_dataset(db, await make_user(db))

    with pytest.raises(ValidationError, match="File size cannot be negative"):
        await create_dataset_file(db, file_request(dataset.id, size=-1), settings)

    with pytest.raises(ValidationError) as excinfo:
        await create_dataset_file(
            db, file_request(dataset.id, size=MAX_FILE_SIZE + 1), settings
        )
    assert excinfo.value.detail == (
        f"File size {MAX_FILE_SIZE + 1} exceeds maximum allowed size of "
        f"{MAX_FILE_SIZE} bytes"
    )

    at_limit = await create_dataset_file(
        db, file_request(dataset.id, size=MAX_FILE_SIZE), settings
    )
    empty = await create_dataset_file(db, file_request(dataset.id, size=0), settings)
    assert at_limit.size == MAX_FILE_SIZE
    assert empty.size == 0


@pytest.mark.asyncio
async def test_create_dataset_file_missing_dataset(db, settings):
    with pytest.raises(NotFound, match="Dataset with id 31 does not exist"):
        await create_dataset_file(db, file_request(31), settings)


@pytest.mark.asyncio
async def test_list_dataset_files(db, settings):
    contributor = await make_user(db)
    dataset = await make_dataset(db, contributor)
    other = await make_dataset(db, contributor)
    first = await create_dataset_file(db, file_request(dataset.id), settings)
    second = await create_dataset_file(
        db, file_request(dataset.id, filename="iris.json", type="json"), settings
    )
    await create_dataset_file(db, file_request(other.id), settings)
    second.created_at = utcnow() - timedelta(minutes=5)
    await db.commit()

    files = await list_dataset_files(db, dataset.id)

    assert [f.id for f in files] == [second.id, first.id]


@pytest.mark.asyncio
async def test_list_files_of_missing_dataset(db):
    with pytest.raises(NotFound, match="Dataset with id 8 not found"):
        await list_dataset_files(db, 8)


@pytest.mark.asyncio
async def test_get_dataset_file(db, settings):
    dataset = await make_dataset(db, await make_user(db))
    dataset_file = await create_dataset_file(db, file_request(dataset.id), settings)

    assert (await get_dataset_file(db, dataset_file.id)).filename == "iris.csv"
    assert await get_dataset_file(db, 999) is None
