"""Domain errors raised by the service layer.

Each error carries the HTTP status the API surface answers with; the mapping
lives here so routes never have to translate errors one by one.
"""

from fastapi import status


class UnimusError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(UnimusError):
    """A referenced user, profile, dataset, file or review does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class PermissionDenied(UnimusError):
    """The acting user's role does not allow the operation."""

    status_code = status.HTTP_403_FORBIDDEN


class Conflict(UnimusError):
    """A uniqueness rule would be violated."""

    status_code = status.HTTP_409_CONFLICT


class ValidationError(UnimusError):
    """Input passed schema validation but breaks a business rule."""

    status_code = status.HTTP_400_BAD_REQUEST


class Unsupported(UnimusError):
    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
