"""Common Pydantic schemas used across the API."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema; fields serialize as camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class HealthResponse(BaseSchema):
    """Health check response schema."""

    status: str
    version: str
    environment: str
    checks: dict[str, str]


class ErrorResponse(BaseSchema):
    """Error response schema. Only a short message is ever exposed."""

    error: str
