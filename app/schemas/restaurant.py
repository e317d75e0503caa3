"""Pydantic schemas for restaurants."""

from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.common import StoredRecord

SORT_BY_RATING = "Rating"
SORT_BY_REVIEW = "Review"


class RestaurantCreate(BaseModel):
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    price: int = Field(..., ge=1, le=4, description="Price tier, 1 ($) to 4 ($$$$)")
    photo: Optional[str] = None


class RestaurantOut(StoredRecord):
    name: str
    category: str
    city: str
    price: int
    photo: Optional[str] = None
    num_ratings: int = 0
    sum_rating: float = 0.0
    avg_rating: float = 0.0


class RestaurantFilters(BaseModel):
    """Equality filters plus one ordering clause for restaurant listings."""

    category: Optional[str] = None
    city: Optional[str] = None
    price: Optional[str] = Field(None, description='Currency symbols, e.g. "$$" for tier 2')
    sort: Optional[str] = Field(None, description='"Rating" (default) or "Review"')

    @property
    def price_tier(self) -> Optional[int]:
        return len(self.price) if self.price else None


class ImageUploadOut(BaseModel):
    photo: str
