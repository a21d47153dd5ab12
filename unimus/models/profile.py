from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from unimus.models.base import Base, utcnow
from unimus.models.enums import ProfileType, sa_enum

if TYPE_CHECKING:
    from unimus.models.user import User


class Profile(Base):
    __tablename__ = "profiles"
    id: Mapped[int] = mapped_column(primary_key=True)
    # at most one profile per user
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), unique=True
    )
    type: Mapped[ProfileType] = mapped_column(sa_enum(ProfileType, "profile_type"))
    institution: Mapped[str]
    department: Mapped[str]
    orcid: Mapped[str | None]
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow)

    user: Mapped["User"] = relationship(back_populates="profile", lazy="selectin")
