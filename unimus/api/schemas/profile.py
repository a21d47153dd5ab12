from datetime import datetime

from unimus.models.enums import ProfileType

from .base import BaseSchema
from .user import UserMetadataResponse


class ProfileBase(BaseSchema):
    user_id: int
    type: ProfileType
    institution: str
    department: str
    orcid: str | None = None


class ProfileCreateRequest(ProfileBase):
    pass


class ProfileMetadataResponse(ProfileBase):
    id: int
    created_at: datetime
    updated_at: datetime


class ProfileWithUserResponse(ProfileMetadataResponse):
    user: UserMetadataResponse
