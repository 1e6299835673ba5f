"""
Pydantic models for MongoDB 'bikes' collection.
"""

import os
from datetime import datetime
from enum import Enum

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from bike_reviews.config import MAX_IMAGES, MIN_IMAGES


class WorthTheCost(str, Enum):
    YES = "Yes"
    DEFINITELY_YES = "Definitely Yes"
    NO = "No"


class ReviewSubmission(BaseModel):
    """Fields a rider fills in; numeric values arrive as form strings and are coerced."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())

    rider_name: str = Field(min_length=1)
    bike_name: str = Field(min_length=1)
    model_name: str = Field(min_length=1)
    purchase_year: int
    total_km: float = Field(0, alias="totalKM")
    bike_cost: float
    cost_per_service: float = 0
    review: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)
    worth_the_cost: WorthTheCost = WorthTheCost.YES


class Review(ReviewSubmission):
    id: str | None = Field(None, alias="_id")
    images: list[str] = Field(min_length=MIN_IMAGES, max_length=MAX_IMAGES)
    created_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, value):
        return str(value) if isinstance(value, ObjectId) else value


class UploadedImage(BaseModel):
    filename: str = ""
    content_type: str | None = None
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        ext = os.path.splitext(self.filename)[1].lower()
        return ext or ".jpg"
