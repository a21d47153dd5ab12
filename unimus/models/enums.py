import enum

from sqlalchemy import Enum


class UserRole(str, enum.Enum):
    VIEWER = "viewer"
    CONTRIBUTOR = "contributor"
    CURATOR = "curator"
    ADMIN = "admin"


class ProfileType(str, enum.Enum):
    LECTURER = "lecturer"
    STUDENT = "student"


class AccessLevel(str, enum.Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    RESTRICTED = "restricted"


class DatasetStatus(str, enum.Enum):
    DRAFT = "draft"
    REVIEW = "review"
    APPROVED = "approved"
    PUBLISHED = "published"


class ReviewStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


# roles allowed to submit datasets
CONTRIBUTING_ROLES = frozenset(
    {UserRole.CONTRIBUTOR, UserRole.CURATOR, UserRole.ADMIN}
)
# roles allowed to file curation reviews
CURATING_ROLES = frozenset({UserRole.CURATOR, UserRole.ADMIN})


def sa_enum(enum_cls: type[enum.Enum], name: str) -> Enum:
    """Column type storing the enum's values (not member names)."""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )
