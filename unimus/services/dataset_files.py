from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from structlog import get_logger

from unimus.api.schemas.dataset_file import DatasetFileCreateRequest
from unimus.config import Settings, get_settings
from unimus.errors import NotFound, ValidationError
from unimus.models import Dataset, DatasetFile

logger = get_logger(__name__)

ALLOWED_FILE_TYPES = ("csv", "json", "arff")


def validate_file_metadata(file_type: str, size: int, max_size: int) -> None:
    if file_type.lower() not in ALLOWED_FILE_TYPES:
        raise ValidationError(
            f"Invalid file type: {file_type}. Allowed types: {', '.join(ALLOWED_FILE_TYPES)}"
        )
    if size < 0:
        raise ValidationError("File size cannot be negative")
    if size > max_size:
        raise ValidationError(
            f"File size {size} exceeds maximum allowed size of {max_size} bytes"
        )


async def create_dataset_file(
    db: AsyncSession,
    file_in: DatasetFileCreateRequest,
    settings: Settings | None = None,
) -> DatasetFile:
    settings = settings or get_settings()
    log = logger.bind(dataset_id=file_in.dataset_id)

    validate_file_metadata(file_in.type, file_in.size, settings.MAX_FILE_SIZE)
    if await Dataset.get(db, id=file_in.dataset_id) is None:
        raise NotFound(f"Dataset with id {file_in.dataset_id} does not exist")

    dataset_file = DatasetFile(**file_in.model_dump())
    await dataset_file._asave(db)
    await db.commit()

    log.info(
        "Recorded dataset file",
        file_id=dataset_file.id,
        type=dataset_file.type,
        size=dataset_file.size,
    )
    return dataset_file


async def list_dataset_files(db: AsyncSession, dataset_id: int) -> list[DatasetFile]:
    if await Dataset.get(db, id=dataset_id) is None:
        raise NotFound(f"Dataset with id {dataset_id} not found")

    result = await db.scalars(
        select(DatasetFile)
        .where(DatasetFile.dataset_id == dataset_id)
        .order_by(DatasetFile.created_at, DatasetFile.id)
    )
    return list(result.all())


async def get_dataset_file(db: AsyncSession, file_id: int) -> DatasetFile | None:
    return await DatasetFile.get(db, id=file_id)
