from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import UTCDateTime


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100)


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)


class CategoryResponse(BaseModel):
    id: int
    name: str
    slug: str
    created_at: Optional[UTCDateTime] = None

    model_config = ConfigDict(from_attributes=True)


class CategoryWithCount(CategoryResponse):
    tutor_count: int = 0
