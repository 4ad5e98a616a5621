"""Common schemas and field types used across the API."""

from datetime import datetime
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

from grocery_api.utils import as_naive_utc


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


# Timestamps are handled as naive UTC throughout the service
UTCDateTime = Annotated[datetime, AfterValidator(as_naive_utc)]

# An empty sync id from a client means "not assigned yet"
SyncId = Annotated[str | None, BeforeValidator(_blank_to_none)]


class CamelModel(BaseModel):
    """Base model exchanged with the mobile client (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str
