"""Review submission: folds a new rating into a restaurant's running statistics."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.errors import InvalidArgument, NotFound
from app.db.store import DocumentStore
from app.models.restaurant import Restaurant
from app.models.review import Review
from app.schemas.review import ReviewCreate, ReviewOut

logger = logging.getLogger(__name__)


def fold_rating(num_ratings: int | None, sum_rating: float | None, rating: float) -> tuple[int, float, float]:
    """Return (num, sum, avg) after adding ``rating`` to the current totals."""
    new_num = (num_ratings or 0) + 1
    new_sum = (sum_rating or 0.0) + float(rating)
    return new_num, new_sum, new_sum / new_num


def _validate_review(review: ReviewCreate | Mapping[str, Any] | None) -> ReviewCreate:
    if review is None:
        raise InvalidArgument("A valid review has not been provided.")
    if isinstance(review, ReviewCreate):
        return review
    try:
        return ReviewCreate.model_validate(review)
    except ValidationError as exc:
        raise InvalidArgument("A valid review has not been provided.") from exc


class ReviewService:
    """Writes reviews and keeps restaurant aggregates consistent with them."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def add_review_to_restaurant(
        self,
        restaurant_id: str | None,
        review: ReviewCreate | Mapping[str, Any] | None,
    ) -> ReviewOut:
        """Insert ``review`` and update the restaurant's count/sum/average atomically.

        Both writes happen in one store transaction; a concurrent writer on the
        same restaurant makes the attempt fail its version check and the store
        runs it again against fresh totals.
        """
        if not restaurant_id:
            raise InvalidArgument("No restaurant ID has been provided.")
        payload = _validate_review(review)

        def apply_rating(db: Session) -> Review:
            restaurant = db.get(Restaurant, restaurant_id)
            if restaurant is None:
                raise NotFound(f"Restaurant {restaurant_id} does not exist.")

            num, total, average = fold_rating(restaurant.num_ratings, restaurant.sum_rating, payload.rating)
            restaurant.num_ratings = num
            restaurant.sum_rating = total
            restaurant.avg_rating = average

            # timestamp is left to the database server
            row = Review(
                restaurant_id=restaurant_id,
                rating=payload.rating,
                text=payload.text,
                user_id=payload.user_id,
                seq=num,
            )
            db.add(row)
            db.flush()
            return row

        try:
            row = self.store.run_transaction(apply_rating)
        except Exception:
            logger.exception("There was an error adding the rating to restaurant %s", restaurant_id)
            raise

        logger.info("Added rating %.1f to restaurant %s", payload.rating, restaurant_id)
        return ReviewOut.model_validate(row)
