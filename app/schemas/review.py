"""Pydantic schemas for reviews."""

from pydantic import BaseModel, Field

from app.schemas.common import StoredRecord

MIN_RATING = 0.0
MAX_RATING = 5.0


class ReviewCreate(BaseModel):
    """Review payload supplied by a client. Extra keys, including any timestamp, are dropped."""

    rating: float = Field(..., ge=MIN_RATING, le=MAX_RATING)
    text: str = ""
    user_id: str = Field(..., min_length=1)


class ReviewOut(StoredRecord):
    restaurant_id: str
    rating: float
    text: str
    user_id: str
