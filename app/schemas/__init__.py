"""Expose schemas for easier import."""

from app.schemas.restaurant import (  # noqa: F401
    ImageUploadOut,
    RestaurantCreate,
    RestaurantFilters,
    RestaurantOut,
)
from app.schemas.review import ReviewCreate, ReviewOut  # noqa: F401
