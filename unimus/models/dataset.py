from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from unimus.models.base import Base, utcnow
from unimus.models.enums import AccessLevel, DatasetStatus, sa_enum

if TYPE_CHECKING:
    from unimus.models.curation_review import CurationReview
    from unimus.models.dataset_file import DatasetFile
    from unimus.models.user import User


class Dataset(Base):
    __tablename__ = "datasets"
    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str]
    description: Mapped[str] = mapped_column(Text)
    domain: Mapped[str]
    task: Mapped[str]
    license: Mapped[str]
    doi: Mapped[str | None]
    access_level: Mapped[AccessLevel] = mapped_column(
        sa_enum(AccessLevel, "dataset_access_level")
    )
    # only curation reviews and explicit updates move this, see unimus.services.workflow
    status: Mapped[DatasetStatus] = mapped_column(
        sa_enum(DatasetStatus, "dataset_status"), default=DatasetStatus.DRAFT
    )
    publication_year: Mapped[int]
    created_at: Mapped[datetime] = mapped_column(default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow)

    contributor_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    contributor: Mapped["User"] = relationship(
        back_populates="datasets", lazy="selectin"
    )

    files: Mapped[list["DatasetFile"]] = relationship(
        back_populates="dataset",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DatasetFile.id",
    )
    curation_reviews: Mapped[list["CurationReview"]] = relationship(
        back_populates="dataset",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
