from .base import Base  # noqa
from .curation_review import CurationReview  # noqa
from .dataset import Dataset  # noqa
from .dataset_file import DatasetFile  # noqa
from .enums import (  # noqa
    CONTRIBUTING_ROLES,
    CURATING_ROLES,
    AccessLevel,
    DatasetStatus,
    ProfileType,
    ReviewStatus,
    UserRole,
)
from .profile import Profile  # noqa
from .user import User  # noqa
