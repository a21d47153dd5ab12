from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel, from_attributes=True):
    @field_validator("*", mode="before")
    @classmethod
    def use_default_if_none(cls, val, info: ValidationInfo) -> Any:
        """validator for compatibility when parsing ORM instances with nullable attributes into response schemas.

        This means that `MySchema(optional_value=None)` behaves the same as
        simply omitting `optional_value` from the kwargs would

        (optional as in "not required", not optional as in "nullable". see
        https://docs.pydantic.dev/latest/migration/#required-optional-and-nullable-fields)
        """
        has_default: bool = not cls.model_fields[info.field_name].is_required()
        if val is None and has_default:
            val = cls.model_fields[info.field_name].get_default(
                call_default_factory=True
            )
        return val


class CamelSchema(BaseSchema):
    """Schema rendered with camelCase keys (previews, reports, dashboard stats).

    Still accepts snake_case field names on input.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PatchSchema(BaseModel):
    """Partial update payload.

    Every field defaults to None but only fields present in the request body
    count as set, so `{"doi": null}` clears the DOI while `{}` leaves it alone.
    Non-nullable columns are typed without `None` so an explicit null is a
    422 rather than a database error.
    """

    def to_patch(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)
