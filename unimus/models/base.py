from datetime import datetime, timezone
from typing import Any, Optional, Type, TypeVar

from sqlalchemy import DateTime, select
from sqlalchemy.ext.asyncio import AsyncAttrs, AsyncSession
from sqlalchemy.orm import DeclarativeBase

T = TypeVar("T", bound="Base")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(AsyncAttrs, DeclarativeBase):
    __abstract__ = True

    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }

    @classmethod
    async def get(cls: Type[T], db: AsyncSession, **kwargs: Any) -> Optional[T]:
        q = select(cls)
        for field, value in kwargs.items():
            q = q.where(getattr(cls, field) == value)

        return (await db.execute(q)).scalar_one_or_none()

    async def _asave(self, db: AsyncSession) -> None:
        db.add(self)
        await db.flush()

    def apply_patch(self, patch: dict[str, Any]) -> None:
        """Set only the attributes present in `patch`.

        Callers build `patch` with `model_dump(exclude_unset=True)` so that an
        explicit `None` clears a nullable column while an omitted field keeps
        its stored value.
        """
        for key, value in patch.items():
            if not hasattr(type(self), key):
                raise TypeError(f"'{key}' is an invalid attribute for {type(self)}")
            setattr(self, key, value)
        if hasattr(type(self), "updated_at"):
            self.updated_at = utcnow()
