from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from unimus.models.base import Base, utcnow
from unimus.models.enums import ReviewStatus, sa_enum

if TYPE_CHECKING:
    from unimus.models.dataset import Dataset
    from unimus.models.user import User


class CurationReview(Base):
    __tablename__ = "curation_reviews"
    id: Mapped[int] = mapped_column(primary_key=True)
    dataset_id: Mapped[int] = mapped_column(
        ForeignKey("datasets.id", ondelete="CASCADE"), index=True
    )
    reviewer_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    status: Mapped[ReviewStatus] = mapped_column(
        sa_enum(ReviewStatus, "curation_review_status")
    )
    notes: Mapped[str | None] = mapped_column(Text)
    reviewed_at: Mapped[datetime] = mapped_column(default=utcnow)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)

    dataset: Mapped["Dataset"] = relationship(back_populates="curation_reviews")
    reviewer: Mapped["User"] = relationship(back_populates="curation_reviews")

    __table_args__ = (
        UniqueConstraint(
            "dataset_id", "reviewer_id", name="uq_curation_reviews_dataset_reviewer"
        ),
    )
