from datetime import datetime, UTC
from typing import Annotated, Any, Dict, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive UTC; mark them as such on the way out."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]


class UserSummary(BaseModel):
    id: int
    name: str
    email: str
    image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


def envelope(
    data: Any = None,
    message: Optional[str] = None,
    pagination: Optional[Dict[str, int]] = None
) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    if pagination is not None:
        body["pagination"] = pagination
    return body
