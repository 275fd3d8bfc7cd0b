"""Base schema configuration for all Pydantic models.

All request and response schemas inherit from one of the public bases so the
wire format stays camelCase while Python code uses snake_case.

Usage:
    - APIRequest: incoming request bodies and the input snapshot models
    - APIResponse: outgoing response bodies and engine results
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _BaseSchema(BaseModel):
    """Private base schema with common configuration.

    Do not use directly - inherit from one of the public subclasses.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,  # Accept both snake_case and camelCase
        use_enum_values=False,
        validate_default=True,
        serialize_by_alias=True,
    )


class APIRequest(_BaseSchema):
    """Base class for incoming payloads.

    Extra fields are ignored: upstream stores may send columns we do not use.
    """

    model_config = ConfigDict(
        extra="ignore",
    )


class APIResponse(_BaseSchema):
    """Base class for outgoing payloads.

    Extra fields are forbidden: only explicitly defined properties are returned.
    """

    model_config = ConfigDict(
        extra="forbid",
    )
