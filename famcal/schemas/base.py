from datetime import datetime
from typing import Annotated, Any
from pydantic import BaseModel, BeforeValidator, ConfigDict
from famcal.engine.intervals import ensure_aware

def parse_datetime(v: Any) -> datetime:
    """Accept ISO strings or datetimes and convert them to UTC; naive values are taken as UTC."""
    if isinstance(v, str):
        try:
            dt = datetime.fromisoformat(v.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError("Invalid datetime format") from e
        return ensure_aware(dt)
    elif isinstance(v, datetime):
        return ensure_aware(v)
    raise ValueError("Invalid datetime type")

UTCDateTime = Annotated[datetime, BeforeValidator(parse_datetime)]

class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(from_attributes=True)

class TimestampSchema(BaseSchema):
    """Schema with timestamp fields."""
    created_at: UTCDateTime | None = None
    updated_at: UTCDateTime | None = None
