"""
Shared schema configuration.

API payloads use camelCase keys (startTime, totalHours, ...); requests accept
snake_case too. Instants are stored as naive UTC and go out with an explicit
"Z" so clients do not read them as local time.
"""

from datetime import datetime, timezone
from typing import Annotated

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def serialize_utc(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat().replace("+00:00", "Z")


UtcDateTime = Annotated[datetime, PlainSerializer(serialize_utc, return_type=str, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
