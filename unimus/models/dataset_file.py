from datetime import datetime
from pathlib import PurePath
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from unimus.models.base import Base, utcnow

if TYPE_CHECKING:
    from unimus.models.dataset import Dataset


class DatasetFile(Base):
    __tablename__ = "dataset_files"
    id: Mapped[int] = mapped_column(primary_key=True)
    dataset_id: Mapped[int] = mapped_column(
        ForeignKey("datasets.id", ondelete="CASCADE"), index=True
    )
    filename: Mapped[str]
    # location on disk recorded at upload time
    path: Mapped[str] = mapped_column(Text)
    size: Mapped[int] = mapped_column(BigInteger)
    # declared type, stored exactly as submitted (e.g. "CSV")
    type: Mapped[str]
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    dataset: Mapped["Dataset"] = relationship(back_populates="files")

    @property
    def extension(self) -> str | None:
        suffix = PurePath(self.filename).suffix
        return suffix[1:].lower() if suffix else None
