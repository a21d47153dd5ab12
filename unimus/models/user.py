from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy.orm import Mapped, mapped_column, relationship
from unimus.models.base import Base, utcnow
from unimus.models.enums import UserRole, sa_enum

if TYPE_CHECKING:
    from unimus.models import CurationReview, Dataset, Profile


class User(Base):
    __tablename__ = "users"
    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(unique=True)
    # bcrypt hash, see unimus.services.passwords
    password: Mapped[str]
    role: Mapped[UserRole] = mapped_column(sa_enum(UserRole, "user_role"))
    name: Mapped[str | None]
    orcid: Mapped[str | None]
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow)

    profile: Mapped[Optional["Profile"]] = relationship(
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    datasets: Mapped[list["Dataset"]] = relationship(
        back_populates="contributor",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    curation_reviews: Mapped[list["CurationReview"]] = relationship(
        back_populates="reviewer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
