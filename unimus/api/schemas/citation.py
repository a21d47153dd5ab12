from .base import BaseSchema


class Citation(BaseSchema):
    apa: str
    ieee: str
