from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class AvailabilitySlotIn(BaseModel):
    """Day and time are validated by the availability service."""
    day_of_week: str
    start_time: str
    end_time: str
    is_active: Optional[bool] = True


class AvailabilityReplace(BaseModel):
    slots: List[AvailabilitySlotIn]


class AvailabilitySlotResponse(BaseModel):
    id: int
    day_of_week: str
    start_time: str
    end_time: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)
